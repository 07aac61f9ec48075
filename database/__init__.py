"""
Database package: declarative base shared by all models.
"""
from sqlalchemy.orm import declarative_base

# Create base class for models
Base = declarative_base()

# Import all models to ensure they are registered with Base
# This must be done after Base is created but before any table operations
try:
    from models import (
        User, Thesis, ThesisChain, Notification, Event,
        FolderSchedule, ThesisFolder, Report
    )
except ImportError:
    # models is importing us; it registers itself once it finishes
    pass
