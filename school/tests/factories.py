# school/tests/factories.py
from decimal import Decimal

import factory
from factory.django import DjangoModelFactory

from school.models import FeePayment, FeeStructure, GradeEntry, Student


class StudentFactory(DjangoModelFactory):
    class Meta:
        model = Student

    student_id = factory.Sequence(lambda n: f'NP2024{n:04d}')
    last_name = factory.Faker('last_name')
    middle_name = factory.Faker('last_name')
    first_name = factory.Faker('first_name')
    gender = 'M'
    date_of_birth = factory.Faker('date_of_birth', minimum_age=12, maximum_age=19)
    place_of_birth = 'Kinshasa'
    class_level = '4ème'
    section = 'Électricité'
    school_code = 'CSM001'
    is_active = True


class FeeStructureFactory(DjangoModelFactory):
    class Meta:
        model = FeeStructure
        django_get_or_create = ('class_level', 'academic_year')

    academic_year = '2024-2025'
    class_level = '4ème'
    annual_amount = Decimal('1200.00')
    quarterly_amount = Decimal('300.00')
    monthly_amount = Decimal('100.00')
    currency = 'CDF'
    due_day = 15


class FeePaymentFactory(DjangoModelFactory):
    class Meta:
        model = FeePayment

    student = factory.SubFactory(StudentFactory)
    academic_year = '2024-2025'
    amount = Decimal('100.00')
    payment_method = 'cash'
    recorded_by = 'Économat'


class GradeEntryFactory(DjangoModelFactory):
    class Meta:
        model = GradeEntry

    student = factory.SubFactory(StudentFactory)
    academic_year = '2024-2025'
    class_level = factory.SelfAttribute('student.class_level')
    course = 'Religion'
    grades = factory.LazyFunction(lambda: [8, 9, 18, 7, 8, 17])
