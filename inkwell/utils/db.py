from sqlalchemy.exc import SQLAlchemyError

from inkwell.errors import StoreError
from inkwell.extensions import db


def safe_commit():
    """
    Commit; hata olursa rollback yapıp StoreError fırlatır.
    Purge döngüsü dışında bu hata yutulmaz.
    """
    try:
        db.session.commit()
    except SQLAlchemyError as e:
        db.session.rollback()
        raise StoreError("Database operation failed") from e
