from datetime import datetime

import pytest

QUOTE_TEXT = """ADVANCED COMPONENTS LTD.
PO Number: PO-538-003
Supplier: Advanced Components Ltd.
Customer No: CUST-001
Date: 2024-03-15

Part#: VALVE-SS-1/4  Description: Stainless Steel Ball Valve 1/4"  Qty: 5  Price: $125.00
Part#: GAUGE-VAC-001  Description: Vacuum Gauge 0-30 inHg  Qty: 2  Price: $89.50

Subtotal: $804.00
"""

# Three part numbers, two quantities, four prices and no tabular rows.
UNSTRUCTURED_TEXT = """PO Number: PO-538-010
Part #: ABC-100
Part #: DEF-200
Part #: GHI-300
Qty: 3
Qty: 7
Unit Price: $10.00
Unit Price: $20.00
Unit Price: $30.00
Unit Price: $40.00
"""

IMPORTED_AT = datetime(2024, 5, 1, 12, 0, 0)


@pytest.fixture
def quote_text():
    return QUOTE_TEXT


@pytest.fixture
def unstructured_text():
    return UNSTRUCTURED_TEXT


@pytest.fixture
def imported_at():
    return IMPORTED_AT
