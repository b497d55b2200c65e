"""
Payment Voucher Module

Generates a printable PDF voucher for a disbursement, including the
receiver's signature for cash payments.
"""

import logging
from datetime import datetime
from io import BytesIO
from pathlib import Path
from xml.sax.saxutils import escape

from reportlab.lib import colors
from reportlab.lib.pagesizes import A4
from reportlab.lib.styles import ParagraphStyle, getSampleStyleSheet
from reportlab.lib.units import inch
from reportlab.platypus import Image, Paragraph, SimpleDocTemplate, Spacer, Table, TableStyle

from ..config import FinanceConfig
from ..workflow.models import Disbursement, PaymentMethod, PaymentRequest
from ..workflow.signature import decode_signature

logger = logging.getLogger(__name__)


class PaymentVoucherGenerator:
    """Builds disbursement vouchers."""

    def __init__(self, config_dir: Path | str | None = None):
        self.config = FinanceConfig(config_dir)

    def generate(
        self,
        disbursement: Disbursement,
        request: PaymentRequest | None,
        output_path: Path | str | None = None,
    ) -> bytes:
        """Render the voucher.

        Args:
            disbursement: Disbursement to print
            request: The paid request (None if it no longer exists)
            output_path: Also write the PDF here when given

        Returns:
            PDF content
        """
        buffer = BytesIO()
        doc = SimpleDocTemplate(
            buffer,
            pagesize=A4,
            rightMargin=0.75*inch,
            leftMargin=0.75*inch,
            topMargin=0.75*inch,
            bottomMargin=0.75*inch,
            title=f"Payment Voucher {disbursement.id}",
        )

        styles = getSampleStyleSheet()
        elements = []

        elements.append(Paragraph(f"<b>{escape(self.config.app_name)}</b>", styles['Heading1']))
        elements.append(Paragraph("Payment Voucher", styles['Heading2']))
        elements.append(Spacer(1, 0.2*inch))

        details = [
            ["Voucher No.:", disbursement.id],
            ["Request ID:", disbursement.request_id],
            ["Payee:", request.requester_name if request else "Unknown"],
            ["Department:", request.department if request else "-"],
            ["Purpose:", Paragraph(escape(request.purpose), styles['Normal']) if request else "-"],
            ["Amount:", self.config.format_amount(disbursement.amount)],
            ["Method:", disbursement.method.label],
            ["Processed By:", disbursement.processed_by],
            ["Processed At:", disbursement.processed_at.strftime("%Y-%m-%d %H:%M UTC")],
        ]

        if disbursement.method is PaymentMethod.CASH:
            details.append(["Received By:", disbursement.cash_receiver_name or "-"])
        else:
            details.extend([
                ["Bank:", disbursement.bank_name or "-"],
                ["Account Name:", disbursement.account_name or "-"],
                ["Account No.:", disbursement.account_number or "-"],
                ["Transaction Ref:", disbursement.transaction_ref or "-"],
            ])
        if disbursement.evidence_url:
            details.append(["Evidence:", disbursement.evidence_url])

        table = Table(details, colWidths=[1.6*inch, 4.6*inch])
        table.setStyle(TableStyle([
            ('FONTNAME', (0, 0), (-1, -1), 'Helvetica'),
            ('FONTSIZE', (0, 0), (-1, -1), 10),
            ('FONTNAME', (0, 0), (0, -1), 'Helvetica-Bold'),
            ('VALIGN', (0, 0), (-1, -1), 'TOP'),
            ('LINEBELOW', (0, 0), (-1, -1), 0.25, colors.lightgrey),
            ('BACKGROUND', (0, 5), (-1, 5), colors.whitesmoke),
        ]))
        elements.append(table)
        elements.append(Spacer(1, 0.4*inch))

        if disbursement.method is PaymentMethod.CASH and disbursement.signature_base64:
            signature = decode_signature(disbursement.signature_base64, self.config.signature_max_bytes)
            elements.append(Paragraph("<b>Receiver's Signature</b>", styles['Normal']))
            elements.append(Spacer(1, 0.1*inch))
            elements.append(Image(BytesIO(signature.content), width=2.5*inch, height=1*inch, kind='proportional'))

        elements.append(Spacer(1, 0.5*inch))
        elements.append(Paragraph(
            f"<i>Generated: {datetime.now().strftime('%Y-%m-%d %H:%M')}</i>",
            ParagraphStyle('Footer', parent=styles['Normal'], textColor=colors.grey, fontSize=8)
        ))

        doc.build(elements)
        content = buffer.getvalue()

        if output_path is not None:
            output_path = Path(output_path)
            output_path.parent.mkdir(parents=True, exist_ok=True)
            output_path.write_bytes(content)
            logger.info(f"Generated payment voucher: {output_path}")

        return content
