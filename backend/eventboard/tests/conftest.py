import os
os.environ["TESTING"] = "1"
os.environ.setdefault("DATABASE_URL", "sqlite:///./test.db")
import io
import shutil

import pandas as pd
import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker

from eventboard.main import app
from eventboard.database import Base, get_db
from eventboard import models

SQLALCHEMY_DATABASE_URL = "sqlite:///./test.db"
engine = create_engine(
    SQLALCHEMY_DATABASE_URL,
    connect_args={"check_same_thread": False, "timeout": 30},
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

Base.metadata.drop_all(bind=engine)
Base.metadata.create_all(bind=engine)

def override_get_db():
    db = TestingSessionLocal()
    try:
        yield db
    finally:
        db.close()

app.dependency_overrides[get_db] = override_get_db


@pytest.fixture(autouse=True)
def upload_dir(tmp_path):
    d = tmp_path / "uploads"
    d.mkdir()
    os.environ["UPLOAD_DIR"] = str(d)
    yield
    shutil.rmtree(d, ignore_errors=True)

@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def db():
    session = TestingSessionLocal()
    try:
        yield session
    finally:
        session.close()


@pytest.fixture
def event(db):
    row = models.Event(event_name="Demo Day")
    db.add(row)
    db.commit()
    db.refresh(row)
    return row


def build_workbook(sheets: dict) -> bytes:
    """Write {sheet name: list of row dicts or DataFrame} to xlsx bytes."""

    buffer = io.BytesIO()
    with pd.ExcelWriter(buffer, engine="openpyxl") as writer:
        for name, rows in sheets.items():
            frame = rows if isinstance(rows, pd.DataFrame) else pd.DataFrame(rows)
            frame.to_excel(writer, sheet_name=name, index=False)
    return buffer.getvalue()


SAMPLE_SHEETS = {
    "Days": [
        {"Day Name": "Day 1", "Date (YYYY-MM-DD)": "2026-02-11"},
        {"Day Name": "Day 2", "Date (YYYY-MM-DD)": "2026-02-12"},
    ],
    "Agenda Slots": [
        {"Day Name": "Day 1", "Slot Title": "Opening", "Start Time": "09:00", "End Time": "10:00", "Presenter Name": "John", "Show Presenter": "TRUE"},
        {"Day Name": "Day 1", "Slot Title": "Keynote", "Start Time": "10:00", "End Time": "11:00", "Presenter Name": "Jane", "Show Presenter": "TRUE"},
        {"Day Name": "Day 2", "Slot Title": "Workshop", "Start Time": "14:00", "End Time": "16:00", "Presenter Name": "Alice", "Show Presenter": "FALSE"},
    ],
    "Experts": [
        {"Name": "Jane Doe", "Title": "CEO", "Bio": "Builder", "LinkedIn URL": "https://linkedin.com/in/janedoe"},
    ],
    "Companies": [
        {"Company Name": "Tech Innovators", "Founder": "Alice Brown", "Governorate": "Cairo", "Industry": "Software"},
    ],
}
