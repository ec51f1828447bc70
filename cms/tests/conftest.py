import os

# Set before cms.config is imported anywhere so cached settings pick them up.
os.environ["CMS_USE_IN_MEMORY_BACKENDS"] = "1"
os.environ["CMS_SESSION_SECRET"] = "test-secret"
os.environ.setdefault("CMS_ENV", "development")
