from inkwell.utils.clock import utcnow
from inkwell.extensions import db

class User(db.Model):
    __tablename__ = "users"

    id = db.Column(db.Integer, primary_key=True)
    username = db.Column(db.String(30), unique=True, nullable=False, index=True)
    email = db.Column(db.String(255), unique=True, nullable=False, index=True)

    # hash servis katmanında (AuthService) üretilir, model hook'u yok
    password_hash = db.Column(db.String(255), nullable=False)

    bio = db.Column(db.Text, nullable=False, default="")
    location = db.Column(db.String(200), nullable=True, default="")
    social_links = db.Column(db.JSON, nullable=True, default=dict)
    avatar_url = db.Column(db.String(500), nullable=False, default="")
    is_admin = db.Column(db.Boolean, nullable=False, default=False)

    created_at = db.Column(db.DateTime, nullable=False, default=utcnow)
