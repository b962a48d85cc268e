"""Load a YAML service description and preview the first rendered request."""

from __future__ import annotations

import logging
import sys
from pathlib import Path

# Allow running this script directly from repository root.
PROJECT_ROOT = next(
    (parent for parent in Path(__file__).resolve().parents if (parent / "rest_table").exists()),
    None,
)
if PROJECT_ROOT and str(PROJECT_ROOT) not in sys.path:
    sys.path.insert(0, str(PROJECT_ROOT))

from rest_table import E, QueryContext, TemplateRenderer, build_request, load_service_config
from rest_table.core import TemplateContextBuilder, build_fields, to_dnf


def main() -> None:
    logging.basicConfig(level=logging.DEBUG)
    service = load_service_config(Path(__file__).with_name("service.yaml"))
    table = service.table("employees")
    request_config = table.request or service.request
    fields = build_fields(table)

    where = E.and_(E.eq(E.col(2), E.lit("ENG")), E.eq(E.col(4), E.lit("2024-06-30", "DATE")))
    context = QueryContext()
    TemplateContextBuilder().fill(
        context,
        request_config,
        fields,
        table.name,
        dnf_filters=to_dnf(where),
        properties={"token": "demo-token"},
    )

    for address in request_config.address_list:
        request = build_request(address, request_config, context.variables, TemplateRenderer())
        print(request.method, request.url)
        print(request.headers)
        print(request.body)


if __name__ == "__main__":
    main()
