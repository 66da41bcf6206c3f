# school/services/__init__.py
