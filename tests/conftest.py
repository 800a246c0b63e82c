import json
import shutil
import tempfile

import pytest

from mailthread.config import Config
from mailthread.mail_store import MailStore
from mailthread.models import MessageRecord


def header(record_id, count, folder="inbox", **kwargs):
    return MessageRecord(id=record_id, depth=0, conversation_count=count, folder_label=folder, **kwargs)


def item(record_id, folder="inbox", **kwargs):
    return MessageRecord(id=record_id, depth=1, folder_label=folder, **kwargs)


def ids(records):
    return [record.id for record in records]


@pytest.fixture
def temp_config_dir():
    """Create a temporary config directory for tests"""
    temp_dir = tempfile.mkdtemp()
    yield temp_dir
    shutil.rmtree(temp_dir)


@pytest.fixture
def test_config(temp_config_dir):
    """Create a test config instance"""
    return Config(config_dir=temp_config_dir)


@pytest.fixture
def thread_batch():
    """Inbox thread with a Sent Items participant, followed by a standalone message"""
    return [
        header("H1", 2, subject="Quarterly report"),
        item("I1", subject="Re: Quarterly report"),
        item("I2", folder="sent", subject="Re: Quarterly report"),
        header("H2", 0, subject="Lunch?"),
    ]


@pytest.fixture
def two_thread_batch():
    return [
        header("H1", 2),
        item("I1"),
        item("I2", folder="sent"),
        header("S1", 0),
        header("H2", 1),
        item("J1"),
    ]


@pytest.fixture
def store():
    return MailStore(folder_id="inbox")


@pytest.fixture
def batch_file(tmp_path, thread_batch):
    path = tmp_path / "batch.json"
    path.write_text(json.dumps([record.to_dict() for record in thread_batch]))
    return path
