"""
Interactive CLI for browsing the DocuScan registry as a given user.
Every listing is narrowed to the document types the user is allowed to see.
"""

import pandas as pd

from docuscan.config import DEFAULT_PAGE_SIZE
from docuscan.database import init_engine, make_session_factory
from docuscan.documents import (
    document_summary,
    get_document,
    get_document_by_barcode,
    list_documents,
    search_documents,
)
from docuscan.exceptions import AccessDeniedError, DocumentNotFoundError
from docuscan.identity import load_current_user, update_last_logon
from docuscan.models import DocumentSearchRequest

HELP = """Commands:
  list              all documents you can see
  search <text>     documents whose number or comment contains <text>
  show <id>         one document by id
  barcode <n>       one document by barcode
  quit"""


def print_documents(docs) -> None:
    if not docs:
        print("(no documents)")
        return
    df = pd.DataFrame([document_summary(d) for d in docs])
    print(df.to_string(index=False))


def run_command(session, user, line: str) -> bool:
    """Execute one REPL line; returns False when the user wants to leave."""
    cmd, _, arg = line.partition(" ")
    cmd, arg = cmd.lower(), arg.strip()

    if cmd in {"quit", "exit"}:
        return False
    if cmd == "list":
        print_documents(list_documents(session, user))
    elif cmd == "search":
        by_number = DocumentSearchRequest(
            document_number=arg, page_size=DEFAULT_PAGE_SIZE, sort_column="barcode")
        if not by_number.has_any_filter():
            print("Usage: search <text>")
            return True
        by_comment = DocumentSearchRequest(
            comment=arg, page_size=DEFAULT_PAGE_SIZE, sort_column="barcode")
        by_number = search_documents(session, user, by_number)
        by_comment = search_documents(session, user, by_comment)
        seen = {d.id: d for d in by_number.items + by_comment.items}
        print_documents(sorted(seen.values(), key=lambda d: d.barcode))
    elif cmd == "show":
        if not arg.isdigit():
            print("Usage: show <id>")
            return True
        try:
            print_documents([get_document(session, user, int(arg))])
        except (DocumentNotFoundError, AccessDeniedError) as e:
            print(f"[ERROR] {e}")
    elif cmd == "barcode":
        doc = get_document_by_barcode(session, user, arg)
        print_documents([doc] if doc else [])
    else:
        print(HELP)
    return True


def main():
    print("=== DocuScan: document registry browser ===\n")

    engine = init_engine()
    Session = make_session_factory(engine)

    # ── Login ────────────────────────────────────────────────────────
    try:
        account_name = input("Account name (or 'quit'): ").strip()
    except (EOFError, KeyboardInterrupt):
        print("\nExiting.")
        return

    if not account_name or account_name.lower() in {"quit", "exit"}:
        print("Goodbye.")
        return

    with Session() as session:
        user = load_current_user(session, account_name)
        if not user.has_access:
            print(f"\n[auth] {account_name} has no access to DocuScan.")
            return
        update_last_logon(session, account_name)

        scope = "all document types" if user.is_super_user or not user.allowed_document_types \
            else f"document types {user.allowed_document_types}"
        print(f"\n[auth] Logged in as: {user.account_name} ({scope})")
        print(HELP)

        # ── REPL ─────────────────────────────────────────────────────
        while True:
            try:
                line = input("\ndocuscan> ").strip()
            except (EOFError, KeyboardInterrupt):
                print("\nExiting.")
                break
            if not line:
                continue
            if not run_command(session, user, line):
                print("Goodbye.")
                break


if __name__ == "__main__":
    main()
