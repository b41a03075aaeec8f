import os
import tempfile

# Settings are read once at import time, so the test database and storage
# directory must be configured before the app is imported.
_tmp_dir = tempfile.mkdtemp(prefix="unfold-note-tests-")
os.environ.setdefault("UNFOLD_DATABASE_URL", f"sqlite:///{os.path.join(_tmp_dir, 'test.db')}")
os.environ.setdefault("UNFOLD_STORAGE_DIR", os.path.join(_tmp_dir, "storage"))
os.environ.setdefault("UNFOLD_SECRET_KEY", "test-secret")
