import base64
import binascii
import functools
import hmac
import json
import logging
import re
from datetime import date, timedelta
from typing import Any, Dict, List, Optional

from .settings import Settings, load_settings
from .store import BlobStore, dynamo_store

logger = logging.getLogger(__name__)

ADMIN_HEADER = "x-admin-key"

CORS_HEADERS = {
    "Content-Type": "application/json",
    "Access-Control-Allow-Origin": "*",
    "Access-Control-Allow-Headers": "Content-Type, x-admin-key",
    "Access-Control-Allow-Methods": "GET,POST,DELETE,OPTIONS",
}

# ---- Helpers -----------------------------------------------------------------

def resp(status: int, body: Any, headers: Optional[Dict[str, str]] = None):
    base = dict(CORS_HEADERS)
    if headers:
        base.update(headers)
    return {
        "statusCode": status,
        "headers": base,
        "body": "" if status == 204 else json.dumps(body),
    }


def get_header(headers: Optional[Dict[str, str]], name: str) -> str:
    # API Gateway keeps the client's casing; match names case-insensitively
    for k, v in (headers or {}).items():
        if k.lower() == name.lower():
            return v or ""
    return ""


def parse_json(event: Dict[str, Any]) -> Dict[str, Any]:
    """Lenient body parsing: anything that isn't a JSON object becomes {}."""
    body = event.get("body")
    if not body:
        return {}
    if event.get("isBase64Encoded"):
        try:
            body = base64.b64decode(body).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError):
            return {}
    try:
        data = json.loads(body)
    except ValueError:
        return {}
    return data if isinstance(data, dict) else {}


def parse_stored(raw: Optional[str]) -> Any:
    if not raw:
        return None
    try:
        return json.loads(raw)
    except ValueError:
        return raw


_DATE_RE = re.compile(r"\d{4}-\d{2}-\d{2}")


def dates_between(from_iso: str, to_iso: str) -> List[str]:
    """Inclusive list of YYYY-MM-DD days between two dates, stepping whole calendar days."""
    try:
        if not (_DATE_RE.fullmatch(str(from_iso)) and _DATE_RE.fullmatch(str(to_iso))):
            raise ValueError("not YYYY-MM-DD")
        first = date.fromisoformat(str(from_iso))
        last = date.fromisoformat(str(to_iso))
    except ValueError:
        logger.warning("Ignoring unparseable range %r..%r", from_iso, to_iso)
        return []
    # offsets from the start never step past `last`, so a range ending on date.max is fine
    return [(first + timedelta(days=i)).isoformat() for i in range((last - first).days + 1)]


def collect_dates(data: Dict[str, Any]) -> List[str]:
    dates: List[str] = []
    if data.get("date"):
        dates.append(data["date"])
    if isinstance(data.get("dates"), list):
        dates.extend(data["dates"])
    if data.get("from") and data.get("to"):
        dates.extend(dates_between(data["from"], data["to"]))
    return dates


def normalize_record(data: Dict[str, Any]) -> Dict[str, Any]:
    closed = bool(data.get("closed"))
    return {
        "closed": closed,
        "start": None if closed else (data.get("start") or None),
        "end": None if closed else (data.get("end") or None),
        "detail": data.get("detail") or "",
    }

# ---- Errors ------------------------------------------------------------------

class ApiError(Exception):
    status = 500


class BadRequest(ApiError):
    status = 400


class Unauthorized(ApiError):
    status = 401

    def __init__(self, message: str = "Unauthorized"):
        super().__init__(message)


class NotConfigured(ApiError):
    status = 500

    def __init__(self, message: str = "Admin key not configured"):
        super().__init__(message)


def error_to_response(e: Exception):
    if isinstance(e, ApiError):
        return resp(e.status, {"error": str(e)})
    logger.exception("overrides error: %r", e)
    return resp(500, {"error": str(e) or "Server error"})

# ---- Handlers ----------------------------------------------------------------

class OverridesApi:
    """Lambda proxy handler for date override records."""

    def __init__(self, settings: Settings, store: BlobStore):
        self.settings = settings
        self.store = store

    def __call__(self, event: Dict[str, Any], context: Any = None) -> Dict[str, Any]:
        method = (event.get("httpMethod") or "GET").upper()

        # CORS preflight
        if method == "OPTIONS":
            return resp(204, None)

        try:
            if method == "GET":
                return self.handle_get(event)
            if method == "POST":
                return self.handle_post(event)
            if method == "DELETE":
                return self.handle_delete(event)
            return resp(405, {"error": "Method not allowed"})
        except Exception as e:
            return error_to_response(e)

    def require_admin(self, event: Dict[str, Any]) -> None:
        if not self.settings.admin_configured:
            raise NotConfigured()
        supplied = get_header(event.get("headers"), ADMIN_HEADER)
        if not supplied or not hmac.compare_digest(
            supplied.encode("utf-8"), self.settings.admin_key.encode("utf-8")
        ):
            logger.warning("Rejected %s: bad or missing %s", event.get("httpMethod"), ADMIN_HEADER)
            raise Unauthorized()

    def handle_get(self, event: Dict[str, Any]) -> Dict[str, Any]:
        qs = event.get("queryStringParameters") or {}
        day = qs.get("date")
        if day:
            return resp(200, {day: parse_stored(self.store.get(day))})

        out = {}
        for key in self.store.list_keys():
            out[key] = parse_stored(self.store.get(key))
        return resp(200, out)

    def handle_post(self, event: Dict[str, Any]) -> Dict[str, Any]:
        self.require_admin(event)
        data = parse_json(event)

        dates = collect_dates(data)
        if not dates:
            raise BadRequest("date required")

        record = normalize_record(data)
        written = 0
        try:
            for d in dates:
                self.store.set_json(d, record)
                written += 1
        except Exception:
            logger.error("Upsert failed after %d of %d dates: %s", written, len(dates), dates[:written])
            raise
        logger.info("Saved override for %d date(s): %s", written, dates)
        return resp(200, {"ok": True, "saved": written})

    def handle_delete(self, event: Dict[str, Any]) -> Dict[str, Any]:
        self.require_admin(event)
        qs = event.get("queryStringParameters") or {}
        day = qs.get("date")
        if not day:
            raise BadRequest("date required")

        self.store.delete(day)
        logger.info("Deleted override for %s", day)
        return resp(200, {"ok": True})

# ---- Entry point -------------------------------------------------------------

@functools.lru_cache(maxsize=1)
def default_api() -> OverridesApi:
    settings = load_settings()
    logging.getLogger().setLevel(settings.log_level)
    return OverridesApi(settings, dynamo_store(settings))


def handler(event, context):
    if (event.get("httpMethod") or "").upper() == "OPTIONS":
        return resp(204, None)
    try:
        api = default_api()
    except Exception as e:
        return error_to_response(e)
    return api(event, context)
