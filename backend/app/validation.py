"""
Declarative request validation.

Each route declares an ordered list of FieldRule descriptors. The rules are
evaluated against a plain request context (path params + JSON body) before
the route handler runs; every failure is collected and reported at once.
"""
import json
import logging
import math
import re
from dataclasses import dataclass
from decimal import Decimal, ROUND_HALF_UP
from typing import Any, Callable, Literal, NamedTuple

from fastapi import Request
from pydantic import BaseModel, ValidationError

from app.exceptions import RequestValidationFailed

logger = logging.getLogger(__name__)

Location = Literal["params", "body"]

_INT_RE = re.compile(r"^[+-]?\d+$")
_NUMERIC_RE = re.compile(r"^[+-]?(\d+(\.\d*)?|\.\d+)$")
_TRUE_STRINGS = ("true", "1")
_FALSE_STRINGS = ("false", "0")

# products.id is a 32-bit INTEGER column
INT4_MIN = -2_147_483_648
INT4_MAX = 2_147_483_647

# products.price is NUMERIC(10, 2)
PRICE_STEP = Decimal("0.01")
PRICE_LIMIT = Decimal("100000000")


# ---------------- Predicates ---------------- #

def is_int(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, str):
        if not _INT_RE.match(value):
            return False
        value = int(value)
    return isinstance(value, int) and INT4_MIN <= value <= INT4_MAX


def is_string(value: Any) -> bool:
    return isinstance(value, str)


def not_empty(value: Any) -> bool:
    if value is None:
        return False
    if isinstance(value, str):
        return value.strip() != ""
    return True


def is_numeric(value: Any) -> bool:
    if isinstance(value, bool):
        return False
    if isinstance(value, (int, float)):
        return math.isfinite(value)
    return isinstance(value, str) and bool(_NUMERIC_RE.match(value.strip()))


def is_valid_price(value: Any) -> bool:
    """Numeric, and still > 0 and within NUMERIC(10, 2) once rounded to cents."""
    if not is_numeric(value):
        return False
    amount = _to_decimal(value)
    if not Decimal(0) < amount < PRICE_LIMIT:
        return False
    return Decimal(0) < amount.quantize(PRICE_STEP, rounding=ROUND_HALF_UP) < PRICE_LIMIT


def is_boolean(value: Any) -> bool:
    if isinstance(value, bool):
        return True
    return isinstance(value, str) and value.lower() in _TRUE_STRINGS + _FALSE_STRINGS


# ---------------- Sanitizers ---------------- #

def _to_decimal(value: Any) -> Decimal:
    return Decimal(value.strip() if isinstance(value, str) else str(value))


def to_price(value: Any) -> float:
    return float(_to_decimal(value).quantize(PRICE_STEP, rounding=ROUND_HALF_UP))


def to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    return value.lower() in _TRUE_STRINGS


@dataclass(frozen=True)
class FieldRule:
    field: str
    location: Location
    check: Callable[[Any], bool]
    message: str
    sanitize: Callable[[Any], Any] | None = None


def param(field: str, check: Callable[[Any], bool], message: str, sanitize=None) -> FieldRule:
    return FieldRule(field, "params", check, message, sanitize)


def body(field: str, check: Callable[[Any], bool], message: str, sanitize=None) -> FieldRule:
    return FieldRule(field, "body", check, message, sanitize)


def collect_errors(rules: list[FieldRule], params: dict, payload: dict) -> list[dict]:
    """Evaluate every rule and return one error entry per failed rule."""
    sources = {"params": params, "body": payload}
    errors = []
    for rule in rules:
        value = sources[rule.location].get(rule.field)
        if not rule.check(value):
            errors.append({
                "type": "field",
                "value": value,
                "msg": rule.message,
                "path": rule.field,
                "location": rule.location,
            })
    return errors


def sanitize(rules: list[FieldRule], params: dict, payload: dict) -> tuple[dict, dict]:
    """Return copies of params and body with each rule's sanitizer applied."""
    sources = {"params": dict(params), "body": dict(payload)}
    for rule in rules:
        source = sources[rule.location]
        if rule.sanitize and rule.field in source:
            source[rule.field] = rule.sanitize(source[rule.field])
    return sources["params"], sources["body"]


# ---------------- Rule sets ---------------- #

ID_RULES = [
    param("id", is_int, "ID no válido", sanitize=int),
]

NAME_PRICE_RULES = [
    body("name", not_empty, "El nombre de Producto no puede ir vacio"),
    body("name", is_string, "El nombre de Producto debe ser texto"),
    body("price", is_numeric, "Valor no válido", sanitize=to_price),
    body("price", not_empty, "El precio no puede ir vacio"),
    body("price", is_valid_price, "Precio no válido"),
]

CREATE_PRODUCT_RULES = NAME_PRICE_RULES

UPDATE_PRODUCT_RULES = ID_RULES + NAME_PRICE_RULES + [
    body("availability", is_boolean, "Valor para disponibilidad no válido", sanitize=to_bool),
]


# ---------------- FastAPI integration ---------------- #

class ValidatedRequest(NamedTuple):
    product_id: int | None
    payload: BaseModel | None


async def read_json_body(request: Request) -> dict:
    """Return the JSON body as a dict; anything unparseable or non-object counts as empty."""
    raw = await request.body()
    if not raw:
        return {}
    try:
        data = json.loads(raw)
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.info(f"Ignoring malformed JSON body on {request.method} {request.url.path}")
        return {}
    return data if isinstance(data, dict) else {}


def validate_request(rules: list[FieldRule], schema: type[BaseModel] | None = None):
    """Build a dependency that runs `rules` and yields the sanitized request data.

    Raises RequestValidationFailed (rendered as HTTP 400) when any rule fails,
    so the route handler never executes.
    """
    reads_body = any(rule.location == "body" for rule in rules)

    async def dependency(request: Request) -> ValidatedRequest:
        params = dict(request.path_params)
        payload = await read_json_body(request) if reads_body else {}

        errors = collect_errors(rules, params, payload)
        if errors:
            raise RequestValidationFailed(errors)

        params, payload = sanitize(rules, params, payload)
        try:
            model = schema.model_validate(payload) if schema else None
        except ValidationError as e:
            raise RequestValidationFailed(schema_errors(e)) from e

        return ValidatedRequest(product_id=params.get("id"), payload=model)

    return dependency


def schema_errors(exc: ValidationError) -> list[dict]:
    """Render pydantic errors in the same shape as rule failures."""
    return [
        {
            "type": "field",
            "value": error.get("input"),
            "msg": error["msg"],
            "path": ".".join(str(part) for part in error["loc"]),
            "location": "body",
        }
        for error in exc.errors(include_url=False)
    ]
