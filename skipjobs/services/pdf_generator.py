"""Docket PDF generation using xhtml2pdf.

``generate_docket_pdf`` is a pure function of the job, its completion and
the company block: no storage or network access. The generated-at stamp is
the only wall-clock input.
"""

from __future__ import annotations

import base64
import io
from datetime import datetime, timezone
from pathlib import Path

from jinja2 import Environment, FileSystemLoader, select_autoescape

from skipjobs.config import CompanyConfig
from skipjobs.services.geometry import LocationRole, location_for
from skipjobs.services.job_states import action_label, skip_size_label

_TEMPLATE_DIR = Path(__file__).resolve().parent.parent / "templates"

_env = Environment(
    loader=FileSystemLoader(str(_TEMPLATE_DIR)),
    autoescape=select_autoescape(["html", "j2"]),
)


def _encode_image_file(path: str) -> str:
    """Read an image file and return base64-encoded string."""
    full_path = Path(path)
    if not path or not full_path.exists():
        return ""
    data = full_path.read_bytes()
    return base64.standard_b64encode(data).decode("utf-8")


def _detail_rows(job, completion, customer_name: str, driver_name: str) -> list[tuple[str, str]]:
    customer = job.customer
    return [
        ("Customer", customer_name),
        ("Customer Address", (customer.address if customer else None) or "-"),
        ("Customer Phone", (customer.contact_phone if customer else None) or "-"),
        ("Driver", driver_name),
        ("Truck Reg", job.truck_reg),
        ("Job Date", job.job_date.strftime("%d/%m/%Y")),
        ("Skip Size", skip_size_label(completion.skip_size) or "-"),
        ("Action", action_label(completion.action)),
        ("Completed", completion.completed_time.strftime("%d/%m/%Y, %H:%M:%S")),
    ]


def render_docket_html(
    job,
    completion,
    company: CompanyConfig,
    customer_name: str | None = None,
    driver_name: str | None = None,
    generated_at: datetime | None = None,
) -> str:
    customer_name = customer_name or (job.customer.name if job.customer else "Unknown Customer")
    driver_name = driver_name or (job.driver.name if job.driver else "Unknown Driver")
    generated_at = generated_at or datetime.now(timezone.utc)
    locations = completion.locations

    template = _env.get_template("docket.html.j2")
    return template.render(
        company=company,
        logo_b64=_encode_image_file(company.logo_path),
        job=job,
        completion=completion,
        details=_detail_rows(job, completion, customer_name, driver_name),
        customer_address=job.customer.address if job.customer else None,
        yard=location_for(locations, LocationRole.YARD),
        site=location_for(locations, LocationRole.SITE),
        position=location_for(locations, LocationRole.DRIVER_POSITION),
        driver_name=driver_name,
        generated_at=generated_at.strftime("%d/%m/%Y %H:%M UTC"),
    )


def generate_docket_pdf(
    job,
    completion,
    company: CompanyConfig,
    customer_name: str | None = None,
    driver_name: str | None = None,
    generated_at: datetime | None = None,
) -> bytes:
    """Render the single-page skip docket. Returns PDF bytes."""
    from xhtml2pdf import pisa

    html = render_docket_html(
        job, completion, company,
        customer_name=customer_name, driver_name=driver_name, generated_at=generated_at,
    )

    pdf_buffer = io.BytesIO()
    pisa_status = pisa.CreatePDF(io.StringIO(html), dest=pdf_buffer)
    if pisa_status.err:
        raise RuntimeError(f"Docket PDF generation failed with {pisa_status.err} errors")

    return pdf_buffer.getvalue()
