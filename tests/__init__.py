# tests/__init__.py
import os
import tempfile

# Settings are read once at import time, so the test environment is fixed here
os.environ["SQLALCHEMY_DATABASE_URI"] = "sqlite://"
os.environ["ENVIRONMENT"] = "test"
os.environ["LOG_LEVEL"] = "WARNING"
os.environ["BCRYPT_ROUNDS"] = "4"
os.environ["RATE_LIMIT_ENABLED"] = "false"
os.environ["SEED_SAMPLE_DATA"] = "false"
os.environ["UPLOAD_DIR"] = tempfile.mkdtemp(prefix="art-gallery-uploads-")
