#!/usr/bin/env python3
"""
Create the registry tables and a small demo data set.
Point DB_URI at the target database (e.g. sqlite:///docuscan.db) first.
"""

from docuscan.database import create_schema, init_engine, make_session_factory
from docuscan.entities import Document, DocumentType
from docuscan.user_permissions import create_user, grant_permission

DOCUMENT_TYPES = ["Contract", "Invoice", "Bank Guarantee"]


if __name__ == "__main__":
    print("=" * 60)
    print("DocuScan demo data")
    print("=" * 60)

    engine = init_engine()
    create_schema(engine)
    Session = make_session_factory(engine)

    with Session() as session:
        types = [DocumentType(name=name) for name in DOCUMENT_TYPES]
        session.add_all(types)
        session.flush()

        for i, dt in enumerate(types + [None], start=1):
            session.add(Document(
                name=f"Demo document {i}",
                barcode=1000 + i,
                document_type_id=dt.id if dt else None,
                created_by="seed",
            ))
        session.commit()

        create_user(session, "admin", is_super_user=True)
        everything = create_user(session, "reader_all")
        grant_permission(session, everything.id, None)
        contracts = create_user(session, "reader_contracts")
        grant_permission(session, contracts.id, types[0].id)
        create_user(session, "pending")

    print("\nUsers:")
    print("  admin             super user, sees everything")
    print("  reader_all        wildcard permission")
    print("  reader_contracts  Contract documents and untyped documents")
    print("  pending           no permissions, no access")
    print("=" * 60)
