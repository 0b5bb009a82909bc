"""Table number and service type chosen at the start of a customer visit."""
from dataclasses import asdict, dataclass
from typing import Optional

SESSION_KEY = 'service_session'

DINE_IN = 'dine-in'
PICKUP = 'pickup'
DELIVERY = 'delivery'

SERVICE_TYPES = (DINE_IN, PICKUP, DELIVERY)

# Values older clients send for the same service
SERVICE_TYPE_ALIASES = {
    'takeout': PICKUP,
    'takeaway': PICKUP,
    'dine in': DINE_IN,
    'dinein': DINE_IN,
}


def normalize_service_type(value):
    if value in (None, ''):
        return None
    value = str(value).strip().lower()
    value = SERVICE_TYPE_ALIASES.get(value, value)
    if value not in SERVICE_TYPES:
        raise ValueError(f"Unknown service type: {value!r}")
    return value


@dataclass
class ServiceSession:
    table_number: Optional[str] = None
    service_type: Optional[str] = None

    @property
    def is_selected(self):
        return self.service_type is not None

    @classmethod
    def load(cls, session):
        data = session.get(SESSION_KEY) or {}
        return cls(table_number=data.get('table_number'), service_type=data.get('service_type'))

    def save(self, session):
        session[SESSION_KEY] = asdict(self)
        session.modified = True

    @classmethod
    def reset(cls, session):
        session.pop(SESSION_KEY, None)
        session.modified = True
        return cls()

    def update(self, table_number=None, service_type=None):
        if table_number is not None:
            self.table_number = str(table_number).strip() or None
        if service_type is not None:
            self.service_type = normalize_service_type(service_type)
        return self
