"""Fill a project with sample notes.

Usage:
    python generate_sample_notes.py <project_url_id>
    python generate_sample_notes.py --email owner@example.com [--count 120]

Without a project url id, the most recent project of the user given by
--email is used.
"""

import argparse
import sys

from unfold_note.app.core.logging import configure_logging
from unfold_note.app.db.base import Base
from unfold_note.app.db.session import SessionLocal, engine
from unfold_note.app.models.project import Project
from unfold_note.app.models.user import User
from unfold_note.app.services.projects import get_user_projects
from unfold_note.app.services.sample_notes import DEFAULT_NOTE_COUNT, generate_sample_notes


def main(argv=None) -> int:
    parser = argparse.ArgumentParser(description="Generate sample notes for a project.")
    parser.add_argument("project_url_id", nargs="?")
    parser.add_argument("--email", help="owner whose most recent project is used when no project is given")
    parser.add_argument("--count", type=int, default=DEFAULT_NOTE_COUNT)
    args = parser.parse_args(argv)

    configure_logging("INFO")
    Base.metadata.create_all(bind=engine)
    db = SessionLocal()
    try:
        if args.project_url_id:
            project = db.query(Project).filter(Project.url_id == args.project_url_id).first()
            if not project:
                print(f"Project {args.project_url_id} not found.", file=sys.stderr)
                return 1
        else:
            if not args.email:
                parser.error("give a project url id or --email")
            user = db.query(User).filter(User.email == args.email).first()
            if not user:
                print(f"User {args.email} not found.", file=sys.stderr)
                return 1
            projects = get_user_projects(db, user.id)
            if not projects:
                print("No project found. Create a project first.", file=sys.stderr)
                return 1
            project = projects[0]

        succeeded, failed = generate_sample_notes(db, project, count=args.count)
        print(f"Done. total={args.count} succeeded={succeeded} failed={failed}")
        return 0 if failed == 0 else 2
    finally:
        db.close()


if __name__ == "__main__":
    sys.exit(main())
