"""
CSV and Excel export of completed orders and the printable receipt.
"""
import csv
import io

import openpyxl
from openpyxl.styles import Font
from reportlab.lib import colors
from reportlab.lib.units import mm
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.platypus import Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from django.conf import settings
from django.template.loader import render_to_string
from django.utils.html import escape
from django.utils import timezone

from .lifecycle import Status
from .pricing import format_currency, to_money
from .session import DINE_IN, PICKUP, DELIVERY

CSV_HEADER = [
    'OrderID', 'CustName', 'ContactNum', 'Email',
    'TotalSpent', 'OrderDateandTime', 'ServiceType', 'remarks',
]

SERVICE_TYPE_LABELS = {
    DINE_IN: 'Dine-In',
    PICKUP: 'Takeout',
    DELIVERY: 'Delivery',
}


def short_order_id(order):
    return str(order.id)[-8:].upper()


def format_csv_timestamp(value):
    """``MM/DD/YYYY hh:mm AM`` in local time, with no commas."""
    if timezone.is_aware(value):
        value = timezone.localtime(value)
    return value.strftime('%m/%d/%Y %I:%M %p').replace(',', '')


def format_service_type(value):
    if not value:
        return ''
    label = SERVICE_TYPE_LABELS.get(str(value).lower())
    if label:
        return label
    return str(value).replace('-', ' ').capitalize()


def order_csv_row(order):
    return [
        short_order_id(order),
        order.customer_name,
        order.contact_number or '',
        'N/A',
        f"{to_money(order.total):.2f}",
        format_csv_timestamp(order.created_at),
        format_service_type(order.service_type),
        order.notes or 'N/A',
    ]


def completed_orders(orders):
    return [o for o in orders if str(o.status).lower() == Status.COMPLETED]


def write_orders_csv(orders, stream):
    """Write the header and one row per completed order. Returns the row count."""
    rows = completed_orders(orders)
    writer = csv.writer(stream)
    writer.writerow(CSV_HEADER)
    for order in rows:
        writer.writerow(order_csv_row(order))
    return len(rows)


def write_orders_xlsx(orders, stream):
    """Same rows as the CSV in a single-sheet workbook. Returns the row count."""
    rows = completed_orders(orders)
    wb = openpyxl.Workbook()
    ws = wb.active
    ws.title = "Completed Orders"

    ws.append(CSV_HEADER)
    for cell in ws[1]:
        cell.font = Font(bold=True)
    for order in rows:
        row = order_csv_row(order)
        row[4] = float(row[4])
        ws.append(row)

    for column in ws.columns:
        width = max(len(str(cell.value or '')) for cell in column)
        ws.column_dimensions[column[0].column_letter].width = min(width + 2, 50)

    wb.save(stream)
    return len(rows)


def export_filename(today=None, extension='csv'):
    today = today or timezone.localdate()
    return f"completed_orders_{today.isoformat()}.{extension}"


def _receipt_lines(order):
    lines = []
    for item in order.items.all():
        lines.append({
            'name': item.name,
            'variation': (item.variation or {}).get('name'),
            'add_ons': item.add_ons_label,
            'quantity': item.quantity,
            'unit_price': format_currency(item.unit_price),
            'subtotal': format_currency(item.subtotal),
        })
    return lines


def _receipt_context(order):
    return {
        'shop_name': settings.SHOP_NAME,
        'order': order,
        'short_id': short_order_id(order),
        'service_type': format_service_type(order.service_type),
        'lines': _receipt_lines(order),
        'total': format_currency(order.total),
        'created_at': timezone.localtime(order.created_at) if timezone.is_aware(order.created_at) else order.created_at,
        'status': str(order.status).upper(),
    }


def render_receipt(order):
    """HTML for an 80mm thermal receipt."""
    return render_to_string('orders/receipt.html', _receipt_context(order))


RECEIPT_WIDTH = 80 * mm


def receipt_header_lines(order):
    """Customer and service details printed above the items, skipping empty ones."""
    lines = [f"Customer: {order.customer_name}"]
    if order.contact_number:
        lines.append(f"Contact: {order.contact_number}")
    lines.append(f"Service: {format_service_type(order.service_type)}")
    if order.table_number:
        lines.append(f"Table: {order.table_number}")
    if order.address:
        lines.append(f"Address: {order.address}")
    if order.pickup_time:
        lines.append(f"Pickup time: {order.pickup_time}")
    if order.party_size:
        lines.append(f"Party size: {order.party_size}")
    if order.dine_in_time:
        dine_in = order.dine_in_time
        if timezone.is_aware(dine_in):
            dine_in = timezone.localtime(dine_in)
        lines.append(f"Dine-in time: {dine_in.strftime('%m/%d/%Y %I:%M %p')}")
    return lines


def render_receipt_pdf(order):
    """The same receipt as an 80mm-wide PDF. Returns the PDF bytes."""
    context = _receipt_context(order)
    styles = getSampleStyleSheet()
    small = ParagraphStyle('Receipt', parent=styles['Normal'], fontSize=8, leading=10)
    title = ParagraphStyle('ReceiptTitle', parent=styles['Heading2'], alignment=1)

    story = [
        Paragraph(escape(context['shop_name']), title),
        Paragraph(f"Order #{context['short_id']}", small),
    ]
    story.extend(Paragraph(escape(text), small) for text in receipt_header_lines(order))
    story.append(Spacer(1, 4 * mm))

    data = []
    for line in context['lines']:
        name = escape(line['name'])
        if line['variation']:
            name = f"{name} ({escape(line['variation'])})"
        if line['add_ons']:
            name = f"{name}<br/>+ {escape(line['add_ons'])}"
        data.append([
            Paragraph(f"{name}<br/>{line['unit_price']} x {line['quantity']}", small),
            line['subtotal'],
        ])
    data.append(['TOTAL', context['total']])

    table = Table(data, colWidths=[50 * mm, 20 * mm])
    table.setStyle(TableStyle([
        ('FONTSIZE', (0, 0), (-1, -1), 8),
        ('ALIGN', (1, 0), (1, -1), 'RIGHT'),
        ('VALIGN', (0, 0), (-1, -1), 'TOP'),
        ('LINEABOVE', (0, -1), (-1, -1), 1, colors.black),
        ('FONTNAME', (0, -1), (-1, -1), 'Helvetica-Bold'),
    ]))
    story.append(table)
    story.append(Spacer(1, 4 * mm))
    if order.reference_number:
        story.append(Paragraph(f"Reference: {escape(order.reference_number)}", small))
    if order.notes:
        story.append(Paragraph(f"Notes: {escape(order.notes)}", small))
    story.append(Paragraph(context['created_at'].strftime('%m/%d/%Y %I:%M %p'), small))
    story.append(Paragraph(f"Status: {context['status']}", small))

    buffer = io.BytesIO()
    height = (60 + 12 * len(data)) * mm
    doc = SimpleDocTemplate(
        buffer, pagesize=(RECEIPT_WIDTH, height),
        leftMargin=4 * mm, rightMargin=4 * mm, topMargin=4 * mm, bottomMargin=4 * mm,
    )
    doc.build(story)
    return buffer.getvalue()
