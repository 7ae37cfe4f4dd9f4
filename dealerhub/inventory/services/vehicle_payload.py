"""Vehicle payload normalization and response shaping.

Translates between the camelCase JSON the dashboard posts and the
snake_case columns of the `vehicles` table. Normalization rejects on the
first violated invariant; everything else is coerced leniently.
"""
import math
import uuid
from decimal import Decimal, InvalidOperation

from dealerhub.core.exceptions import ValidationError

# (api field, column, kind) in table column order
VEHICLE_FIELDS = (
    ('id', 'id', 'id'),
    ('make', 'make', 'required'),
    ('model', 'model', 'required'),
    ('variant', 'variant', 'text'),
    ('year', 'year', 'int'),
    ('price', 'price', 'number'),
    ('originalPrice', 'original_price', 'number'),
    ('estMonthlyPayment', 'est_monthly_payment', 'number'),
    ('mileage', 'mileage', 'int'),
    ('fuelType', 'fuel_type', 'text'),
    ('transmission', 'transmission', 'text'),
    ('bodyType', 'body_type', 'text'),
    ('condition', 'condition', 'text'),
    ('drive', 'drive', 'text'),
    ('seats', 'seats', 'int'),
    ('color', 'color', 'text'),
    ('engineSize', 'engine_size', 'text'),
    ('description', 'description', 'text'),
    ('images', 'images', 'list'),
    ('features', 'features', 'list'),
    ('isSpecialOffer', 'is_special_offer', 'bool'),
    ('status', 'status', 'status'),
    ('vin', 'vin', 'text'),
    ('engineNumber', 'engine_number', 'text'),
    ('registrationNumber', 'registration_number', 'text'),
    ('stockNumber', 'stock_number', 'required'),
    ('costPrice', 'cost_price', 'number'),
    ('reconditioningCost', 'reconditioning_cost', 'number'),
    ('natisNumber', 'natis_number', 'text'),
    ('previousOwner', 'previous_owner', 'text'),
    ('keyNumber', 'key_number', 'text'),
    ('supplier', 'supplier', 'text'),
    ('purchaseDate', 'purchase_date', 'date'),
    ('branch', 'branch', 'required'),
    ('serviceHistory', 'service_history', 'bool'),
    ('warrantyMonths', 'warranty_months', 'int'),
)

TIMESTAMP_FIELDS = (
    ('createdAt', 'created_at'),
    ('updatedAt', 'updated_at'),
)

VEHICLE_COLUMNS = tuple(column for _, column, _ in VEHICLE_FIELDS)

# Hidden from the public storefront
ADMIN_ONLY_FIELDS = frozenset({
    'costPrice', 'reconditioningCost', 'previousOwner', 'supplier',
    'purchaseDate', 'keyNumber', 'natisNumber',
})

DEFAULT_STATUS = 'draft'

# Postgres INTEGER
INT_MIN = -2 ** 31
INT_MAX = 2 ** 31 - 1


def to_number(value):
    """Permissive numeric conversion.

    Numbers and numeric strings are accepted; booleans, blanks, NaN/inf and
    anything unparseable become None.
    """
    if value is None or isinstance(value, bool):
        return None
    if isinstance(value, (int, float, Decimal)):
        number = value
    elif isinstance(value, str):
        text = value.strip()
        # Decimal() would otherwise read '1_000' as 1000
        if not text or '_' in text:
            return None
        try:
            number = Decimal(text)
        except InvalidOperation:
            return None
    else:
        return None

    if isinstance(number, float) and not math.isfinite(number):
        return None
    if isinstance(number, Decimal):
        if not number.is_finite():
            return None
        return int(number) if number == number.to_integral_value() else float(number)
    return number


def to_integer(value):
    """to_number() restricted to integral values that fit an INTEGER column."""
    number = to_number(value)
    if number is None:
        return None
    if isinstance(number, float):
        if not number.is_integer():
            return None
        number = int(number)
    return number if INT_MIN <= number <= INT_MAX else None


def _text(value):
    return value if isinstance(value, str) else None


def _required_text(value):
    return value.strip() if isinstance(value, str) else ''


def _string_list(value):
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _coerce(kind, value):
    if kind == 'text':
        return _text(value)
    if kind == 'int':
        return to_integer(value)
    if kind == 'number':
        return to_number(value)
    if kind == 'bool':
        return value if isinstance(value, bool) else None
    if kind == 'list':
        return _string_list(value)
    if kind == 'date':
        return value if isinstance(value, str) and value.strip() else None
    if kind == 'status':
        return value if isinstance(value, str) else DEFAULT_STATUS
    raise ValueError(f'Unknown field kind: {kind}')


def new_vehicle_id():
    return str(uuid.uuid4())


def normalize_vehicle_payload(payload):
    """Validate and coerce a posted vehicle into a column -> value dict.

    Raises:
        ValidationError: required text fields blank, or no images.
    """
    if not isinstance(payload, dict):
        raise ValidationError('Invalid JSON')

    row = {}
    for field, column, kind in VEHICLE_FIELDS:
        value = payload.get(field)
        if kind == 'id':
            row[column] = value.strip() if isinstance(value, str) and value.strip() else new_vehicle_id()
        elif kind == 'required':
            row[column] = _required_text(value)
        else:
            row[column] = _coerce(kind, value)

    if not all(row[column] for column in ('make', 'model', 'stock_number', 'branch')):
        raise ValidationError('Missing required fields')
    if not row['images']:
        raise ValidationError('At least one image is required')

    return row


def to_api_vehicle(row):
    """Map a vehicles row (snake_case) to the external camelCase shape."""
    vehicle = {field: row.get(column) for field, column, _ in VEHICLE_FIELDS}
    for field, column in TIMESTAMP_FIELDS:
        vehicle[field] = row.get(column)
    return vehicle


def to_public_vehicle(row):
    """Storefront shape: to_api_vehicle() without admin-only fields."""
    vehicle = to_api_vehicle(row)
    for field in ADMIN_ONLY_FIELDS:
        vehicle.pop(field, None)
    return vehicle
