from fastapi import Depends, HTTPException


def get_db():
    """
    Current database handle, or None when MongoDB is not configured.

    Read from the module at call time, not import time, since connect() runs on startup.
    """
    import gottago.db
    return gottago.db.db


def get_required_db(database=Depends(get_db)):
    if database is None:
        raise HTTPException(status_code=503, detail="Database not configured")
    return database
