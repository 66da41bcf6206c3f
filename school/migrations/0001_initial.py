from decimal import Decimal

import django.core.validators
import django.db.models.deletion
import django.utils.timezone
from django.db import migrations, models

import school.models.financial
import school.models.report_card


class Migration(migrations.Migration):

    initial = True

    dependencies = [
    ]

    operations = [
        migrations.CreateModel(
            name='Student',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('student_id', models.CharField(help_text='Permanent registration number (numéro permanent)', max_length=30, unique=True)),
                ('last_name', models.CharField(max_length=100)),
                ('middle_name', models.CharField(blank=True, help_text='Post-nom', max_length=100)),
                ('first_name', models.CharField(blank=True, max_length=100)),
                ('gender', models.CharField(choices=[('M', 'Masculin'), ('F', 'Féminin')], max_length=1)),
                ('date_of_birth', models.DateField(blank=True, null=True)),
                ('place_of_birth', models.CharField(blank=True, max_length=100)),
                ('class_level', models.CharField(help_text='e.g. 4ème', max_length=50)),
                ('section', models.CharField(blank=True, help_text='e.g. Électricité', max_length=100)),
                ('school_code', models.CharField(blank=True, max_length=20)),
                ('is_active', models.BooleanField(default=True)),
                ('is_fee_paid', models.BooleanField(default=False)),
                ('fee_balance_due', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('fee_status_updated_at', models.DateTimeField(blank=True, null=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Student',
                'verbose_name_plural': 'Students',
                'ordering': ['class_level', 'last_name', 'middle_name', 'first_name'],
                'indexes': [
                    models.Index(fields=['class_level'], name='student_class_level_idx'),
                    models.Index(fields=['is_active'], name='student_is_active_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='FeeStructure',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('academic_year', models.CharField(help_text='Format: YYYY-YYYY', max_length=9)),
                ('class_level', models.CharField(max_length=50)),
                ('annual_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('quarterly_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('monthly_amount', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('currency', models.CharField(default=school.models.financial.default_currency, max_length=5)),
                ('enrollment_fee', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('late_fee', models.DecimalField(decimal_places=2, default=Decimal('0.00'), max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.00'))])),
                ('due_day', models.PositiveSmallIntegerField(default=school.models.financial.default_due_day, validators=[django.core.validators.MinValueValidator(1), django.core.validators.MaxValueValidator(28)])),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
            ],
            options={
                'verbose_name': 'Fee Structure',
                'verbose_name_plural': 'Fee Structures',
                'ordering': ['-academic_year', 'class_level'],
                'unique_together': {('class_level', 'academic_year')},
            },
        ),
        migrations.CreateModel(
            name='FeePayment',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('academic_year', models.CharField(max_length=9)),
                ('amount', models.DecimalField(decimal_places=2, max_digits=12, validators=[django.core.validators.MinValueValidator(Decimal('0.01'))])),
                ('payment_date', models.DateField(default=django.utils.timezone.localdate)),
                ('payment_method', models.CharField(choices=[('cash', 'Cash'), ('mobile_money', 'Mobile Money'), ('bank_transfer', 'Bank Transfer'), ('cheque', 'Cheque'), ('other', 'Other')], default='cash', max_length=20)),
                ('reference', models.CharField(blank=True, db_index=True, max_length=20)),
                ('recorded_by', models.CharField(blank=True, max_length=150)),
                ('notes', models.TextField(blank=True)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='fee_payments', to='school.student')),
            ],
            options={
                'verbose_name': 'Fee Payment',
                'verbose_name_plural': 'Fee Payments',
                'ordering': ['payment_date', 'created_at', 'id'],
                'indexes': [
                    models.Index(fields=['student', 'academic_year'], name='feepayment_student_year_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='GradeEntry',
            fields=[
                ('id', models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name='ID')),
                ('academic_year', models.CharField(max_length=9)),
                ('class_level', models.CharField(max_length=50)),
                ('course', models.CharField(max_length=100)),
                ('grades', models.JSONField(blank=True, default=list)),
                ('created_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('student', models.ForeignKey(on_delete=django.db.models.deletion.CASCADE, related_name='grade_entries', to='school.student')),
            ],
            options={
                'verbose_name': 'Grade Entry',
                'verbose_name_plural': 'Grade Entries',
                'ordering': ['student', 'course'],
                'unique_together': {('student', 'academic_year', 'course')},
                'indexes': [
                    models.Index(fields=['academic_year', 'class_level'], name='gradeentry_year_class_idx'),
                ],
            },
        ),
        migrations.CreateModel(
            name='PublicBulletin',
            fields=[
                ('verification_code', models.CharField(default=school.models.report_card.generate_verification_code, editable=False, max_length=32, primary_key=True, serialize=False)),
                ('academic_year', models.CharField(max_length=9)),
                ('student_snapshot', models.JSONField(default=dict)),
                ('school_snapshot', models.JSONField(default=dict)),
                ('grades', models.JSONField(default=dict)),
                ('totals', models.JSONField(default=list)),
                ('max_totals', models.JSONField(default=list)),
                ('percentages', models.JSONField(default=list)),
                ('specific_percentages', models.JSONField(default=dict)),
                ('rankings', models.JSONField(default=dict)),
                ('completeness', models.JSONField(default=dict)),
                ('published_at', models.DateTimeField(auto_now_add=True)),
                ('updated_at', models.DateTimeField(auto_now=True)),
                ('student', models.ForeignKey(blank=True, null=True, on_delete=django.db.models.deletion.SET_NULL, related_name='bulletins', to='school.student')),
            ],
            options={
                'verbose_name': 'Public Bulletin',
                'verbose_name_plural': 'Public Bulletins',
                'ordering': ['-published_at'],
                'unique_together': {('student', 'academic_year')},
            },
        ),
    ]
