# school/constants/academic.py
"""
Report-card (bulletin) constants: grade columns and default section maxima.
"""

# ========== GRADE COLUMNS ==========
# Nine fixed positions of a report-card row. Slots 3, 7 and 8 are derived.
GRADE_COLUMNS = (
    'P1', 'P2', 'EXAM1', 'TOTAL1',
    'P3', 'P4', 'EXAM2', 'TOTAL2',
    'GENERAL',
)

GRADE_COLUMN_COUNT = len(GRADE_COLUMNS)

FIRST_SEMESTER_COLUMNS = (0, 1, 2)
SECOND_SEMESTER_COLUMNS = (4, 5, 6)
FIRST_SEMESTER_TOTAL = 3
SECOND_SEMESTER_TOTAL = 7
GENERAL_TOTAL = 8

# Minimum length of a row carrying every raw score
MIN_GRADE_ROW_LENGTH = 7

# Stored grade entries keep only the six raw scores:
# [P1, P2, EXAM1, P3, P4, EXAM2]
STORED_SCORE_COUNT = 6

PERCENTAGE_SENTINEL = '-'

# ========== RANKING CATEGORIES ==========
# Category name -> column of the 9-slot totals row
RANKING_CATEGORIES = (
    ('first_p', 0),
    ('second_p', 1),
    ('exam1', 2),
    ('total1', 3),
    ('third_p', 4),
    ('fourth_p', 5),
    ('exam2', 6),
    ('total2', 7),
    ('overall', 8),
)

# ========== DEFAULT SECTIONS ==========
# Subjects sharing identical maxima are grouped in one section.
DEFAULT_SECTIONS = [
    {
        'name': 'MAXIMA 40',
        'subjects': ['Religion', 'Educ. Civ. & Morale', 'Éducation à la vie'],
        'maxima': [10, 10, 20, 40, 10, 10, 20, 40, 80],
    },
    {
        'name': 'MAXIMA 80',
        'subjects': [
            'Anglais',
            'Géo/Actualité',
            'Histoire',
            'Chimie',
            'Physique',
            'Mécanisme',
            'Instr. Meth. Mes.',
            'Techno Mécanique',
        ],
        'maxima': [20, 20, 40, 80, 20, 20, 40, 80, 160],
    },
    {
        'name': 'MAXIMA 160',
        'subjects': ['Informatique', 'Dessin Électrique', 'Dessin Industriel'],
        'maxima': [40, 40, 80, 160, 40, 40, 80, 160, 320],
    },
    {
        'name': 'MAXIMA 200',
        'subjects': ['Électricité Générale', 'Mécanique Générale'],
        'maxima': [50, 50, 100, 200, 50, 50, 100, 200, 400],
    },
]
