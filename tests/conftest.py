"""Pytest configuration and fixtures for the portfolio site test suite."""
import json
import pytest
import sys
from pathlib import Path

from fastapi.testclient import TestClient

# Ensure project modules are importable
sys.path.insert(0, str(Path(__file__).parent.parent))

from api.service import create_app
from config.settings import Settings
from core.contact_store import ContactStore


INDEX_HTML = "<!DOCTYPE html><html><body><h1>Portfolio</h1></body></html>"


# ============================================================================
# FILESYSTEM FIXTURES
# ============================================================================

@pytest.fixture
def public_dir(tmp_path):
    """Public root with a default document and a few assets.

    A ``secret.txt`` sits next to (outside) the public root so traversal
    attempts have something to reach for.
    """
    root = tmp_path / "public"
    root.mkdir()
    (root / "index.html").write_text(INDEX_HTML, encoding="utf-8")
    (root / "styles.css").write_text("body { margin: 0; }", encoding="utf-8")
    (root / "script.js").write_text("console.log('hi');", encoding="utf-8")
    (root / "resume.bin").write_bytes(b"\x00\x01\x02")
    (root / "assets").mkdir()
    (root / "assets" / "logo.svg").write_text("<svg></svg>", encoding="utf-8")
    (tmp_path / "secret.txt").write_text("top secret", encoding="utf-8")
    return root


@pytest.fixture
def contacts_file(tmp_path):
    return tmp_path / "data" / "contacts.json"


@pytest.fixture
def store(contacts_file):
    return ContactStore(contacts_file)


@pytest.fixture
def read_contacts(contacts_file):
    """Return a callable that loads the raw contacts array from disk."""
    def _read():
        return json.loads(contacts_file.read_text(encoding="utf-8"))
    return _read


# ============================================================================
# APPLICATION FIXTURES
# ============================================================================

@pytest.fixture
def settings(public_dir, tmp_path, contacts_file):
    return Settings(
        public_dir=public_dir,
        data_dir=tmp_path / "data",
        contacts_file=contacts_file,
        allowed_origin="https://example.dev",
        max_payload_size=1024 * 100,
    )


@pytest.fixture
def app(settings, store):
    return create_app(settings=settings, store=store)


@pytest.fixture
def client(app):
    """Test client with the application lifespan running."""
    with TestClient(app) as test_client:
        yield test_client


@pytest.fixture
def valid_payload():
    return {
        "name": "Ada Lovelace",
        "email": "ada@example.com",
        "message": "I'd love to talk about an analytical engine project.",
    }
