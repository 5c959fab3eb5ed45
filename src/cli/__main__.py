# src/cli/__main__.py
import sys, json

from sqlmodel import Session

from src.server.db.session import engine, init_db
from src.server.schemas.customer import CustomerIn
from src.server.services.customer_service import CustomerService

USAGE = """Usage:
  python -m src.cli init-db
  python -m src.cli list [--skip=0] [--limit=50]
  python -m src.cli get <id>
  python -m src.cli add <first_name> <last_name> [email]
  python -m src.cli delete <id>

Examples:
  python -m src.cli add Ada Lovelace ada@example.com
  python -m src.cli list --limit=10
"""

def _dump(obj) -> None:
    print(json.dumps(obj, ensure_ascii=False, indent=2))

MAX_ID = 2**63 - 1  # SQLite INTEGER

# kommando -> tillåtet antal positionella argument
COMMANDS = {
    "init-db": (0,),
    "list": (0,),
    "get": (1,),
    "add": (2, 3),
    "delete": (1,),
}

def _usage_error(msg: str = None):
    if msg:
        print(msg, file=sys.stderr)
    print(USAGE, file=sys.stderr)
    sys.exit(1)

def _parse_int(raw, name: str, lo: int, hi: int) -> int:
    try:
        value = int(raw)
    except (TypeError, ValueError):
        _usage_error(f"Ogiltigt värde för {name}: '{raw}'")
    if not lo <= value <= hi:
        _usage_error(f"{name} måste ligga mellan {lo} och {hi}, fick {value}")
    return value

def _parse_id(raw: str) -> int:
    return _parse_int(raw, "id", 1, MAX_ID)

def main(argv=None):
    argv = list(sys.argv[1:] if argv is None else argv)
    if not argv:
        _usage_error()

    cmd = argv[0].lower()
    args = [a for a in argv[1:] if not a.startswith("--")]
    flags = dict(a[2:].split("=", 1) for a in argv[1:] if a.startswith("--") and "=" in a)

    # Validera innan databasen rörs
    if cmd not in COMMANDS or len(args) not in COMMANDS[cmd]:
        _usage_error()
    skip = _parse_int(flags.get("skip", 0), "--skip", 0, MAX_ID)
    limit = _parse_int(flags.get("limit", 50), "--limit", 1, 200)
    customer_id = _parse_id(args[0]) if cmd in ("get", "delete") else None

    init_db()
    if cmd == "init-db":
        print("Databasen är initierad.")
        return

    with Session(engine) as session:
        service = CustomerService(session)

        if cmd == "list":
            _dump([c.model_dump(by_alias=True) for c in service.get_all_customers(skip=skip, limit=limit)])
            return

        if cmd == "get":
            customer = service.get_customer_by_id(customer_id)
            if customer is None:
                print(f"Kund {args[0]} hittades inte", file=sys.stderr)
                sys.exit(2)
            _dump(customer.model_dump(by_alias=True))
            return

        if cmd == "add":
            payload = CustomerIn(
                first_name=args[0],
                last_name=args[1],
                email=args[2] if len(args) == 3 else None,
            )
            new_id = service.add_customer(payload)
            _dump({"customerId": new_id})
            return

        if cmd == "delete":
            if not service.delete_customer(customer_id):
                print(f"Kund {args[0]} hittades inte", file=sys.stderr)
                sys.exit(2)
            print("Customer deleted successfully")
            return

    _usage_error()

if __name__ == "__main__":
    main()
