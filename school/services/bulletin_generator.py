# school/services/bulletin_generator.py
from io import BytesIO
import logging

import qrcode
from django.conf import settings
from django.utils import timezone
from reportlab.lib import colors
from reportlab.lib.pagesizes import A4, landscape
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from school.constants.academic import (
    FIRST_SEMESTER_COLUMNS,
    RANKING_CATEGORIES,
    SECOND_SEMESTER_COLUMNS,
)
from school.utils.validation import normalize_grade_row

logger = logging.getLogger(__name__)

HEADER = ['Branches', '1re P', '2e P', 'Exam', 'Tot', '3e P', '4e P', 'Exam', 'Tot', 'T.G.']


def _nine(values):
    return (list(values) + [''] * 9)[:9]


def _fmt(value):
    if value is None or value == '':
        return ''
    if isinstance(value, float) and value.is_integer():
        return str(int(value))
    return str(value)


class BulletinPDFGenerator:
    """Render a published bulletin to a one-page PDF with a verification QR code"""

    def __init__(self, verification_url=None):
        self.verification_url = verification_url or settings.BULLETIN_VERIFICATION_URL

    def verification_link(self, bulletin):
        return f"{self.verification_url}{bulletin.verification_code}"

    def subject_cells(self, row):
        """Display cells of one subject; a semester total shows only when complete"""
        row = normalize_grade_row(row)
        cells = [_fmt(value) for value in row]
        first = [row[c] for c in FIRST_SEMESTER_COLUMNS]
        second = [row[c] for c in SECOND_SEMESTER_COLUMNS]

        first_total = sum(first) if None not in first else None
        second_total = sum(second) if None not in second else None
        cells[3] = _fmt(first_total)
        cells[7] = _fmt(second_total)
        if first_total is not None and second_total is not None:
            cells[8] = _fmt(first_total + second_total)
        else:
            cells[8] = ''
        return cells

    def summary_rows(self, bulletin):
        complete = bulletin.completeness or {}
        totals = _nine(_fmt(value) for value in bulletin.totals)
        if not complete.get('first_semester'):
            totals[3] = ''
        if not complete.get('second_semester'):
            totals[7] = ''
        if not complete.get('general'):
            totals[8] = ''

        places = []
        for category, _column in RANKING_CATEGORIES:
            ranking = bulletin.rankings.get(category, {})
            places.append(f"{ranking.get('rank', 0)}/{ranking.get('total', 0)}")

        return [
            ['MAXIMA GÉNÉRAUX'] + _nine(_fmt(value) for value in bulletin.max_totals),
            ['TOTAUX'] + totals,
            ['POURCENTAGE'] + _nine(bulletin.percentages),
            ['PLACE/NBRE'] + places,
        ]

    def qr_image(self, bulletin):
        qr = qrcode.QRCode(version=1, box_size=4, border=2)
        qr.add_data(self.verification_link(bulletin))
        qr.make(fit=True)
        qr_img = qr.make_image(fill_color="black", back_color="white")

        qr_buffer = BytesIO()
        qr_img.save(qr_buffer, format='PNG')
        qr_buffer.seek(0)

        image = Image(qr_buffer, width=1.2*inch, height=1.2*inch)
        image.hAlign = 'RIGHT'
        return image

    def generate(self, bulletin):
        """Returns a BytesIO holding the PDF"""
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=landscape(A4),
            rightMargin=36,
            leftMargin=36,
            topMargin=36,
            bottomMargin=24,
        )

        styles = getSampleStyleSheet()
        title_style = ParagraphStyle(
            'BulletinTitle',
            parent=styles['Heading1'],
            fontSize=16,
            spaceAfter=12,
            alignment=1,
        )

        school = bulletin.school_snapshot or {}
        student = bulletin.student_snapshot or {}
        story = [
            Paragraph(school.get('name', ''), title_style),
            Paragraph(school.get('address', ''), styles['Normal']),
            Paragraph(f"BULLETIN DE L'ÉLÈVE - ANNÉE SCOLAIRE {bulletin.academic_year}", styles['Heading2']),
            Spacer(1, 0.15*inch),
        ]

        identity = Table([
            ['Nom:', student.get('full_name', 'N/A'), 'N° Perm.:', student.get('student_id', 'N/A')],
            ['Classe:', student.get('full_class', 'N/A'), 'Né(e) le:', student.get('date_of_birth') or ''],
        ], colWidths=[1*inch, 3.5*inch, 1*inch, 3*inch])
        identity.setStyle(TableStyle([
            ('FONTNAME', (0, 0), (-1, -1), 'Helvetica'),
            ('FONTSIZE', (0, 0), (-1, -1), 9),
            ('BACKGROUND', (0, 0), (0, -1), colors.lightgrey),
            ('BACKGROUND', (2, 0), (2, -1), colors.lightgrey),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.black),
        ]))
        story.append(identity)
        story.append(Spacer(1, 0.15*inch))

        data = [HEADER]
        for subject, row in bulletin.grades.items():
            data.append([subject] + self.subject_cells(row))
        subject_count = len(data) - 1
        data.extend(self.summary_rows(bulletin))

        grades_table = Table(data, colWidths=[2.4*inch] + [0.75*inch] * 9, repeatRows=1)
        grades_table.setStyle(TableStyle([
            ('FONTNAME', (0, 0), (-1, -1), 'Helvetica'),
            ('FONTSIZE', (0, 0), (-1, -1), 8),
            ('BACKGROUND', (0, 0), (-1, 0), colors.grey),
            ('TEXTCOLOR', (0, 0), (-1, 0), colors.whitesmoke),
            ('BACKGROUND', (0, subject_count + 1), (-1, -1), colors.lightgrey),
            ('FONTNAME', (0, subject_count + 1), (-1, -1), 'Helvetica-Bold'),
            ('ALIGN', (1, 0), (-1, -1), 'CENTER'),
            ('GRID', (0, 0), (-1, -1), 0.5, colors.black),
            ('VALIGN', (0, 0), (-1, -1), 'MIDDLE'),
        ]))
        story.append(grades_table)
        story.append(Spacer(1, 0.15*inch))

        specific = bulletin.specific_percentages or {}
        story.append(Paragraph(
            f"Examens: {specific.get('exam_percentage', '-')} % &nbsp; "
            f"Semestres: {specific.get('total_semester_percentage', '-')} % &nbsp; "
            f"Général: {specific.get('general_percentage', '-')} %",
            styles['Normal']
        ))
        story.append(Spacer(1, 0.1*inch))
        story.append(self.qr_image(bulletin))
        story.append(Paragraph(
            f"Code de vérification: {bulletin.verification_code}<br/>"
            f"Imprimé le {timezone.localdate().strftime('%d/%m/%Y')}",
            styles['Italic']
        ))

        doc.build(story)
        buffer.seek(0)

        logger.info(f"Bulletin PDF generated for {bulletin.verification_code}")
        return buffer
