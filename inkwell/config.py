import os
from datetime import timedelta


class Config:
    SECRET_KEY = os.getenv("SECRET_KEY", "super-secret-key")

    SQLALCHEMY_DATABASE_URI = os.getenv("SQLALCHEMY_DATABASE_URI", "sqlite:///inkwell.db")

    SQLALCHEMY_TRACK_MODIFICATIONS = False
    SQLALCHEMY_ENGINE_OPTIONS = {"pool_pre_ping": True}

    JWT_SECRET_KEY = os.getenv("JWT_SECRET_KEY", "jwt-super-secret")
    JWT_ACCESS_TOKEN_EXPIRES = timedelta(days=int(os.getenv("JWT_EXPIRES_DAYS", "30")))

    LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")

    # Silinmiş kitapların kalıcı temizliği (her gün 00:00 UTC + açılışta bir kez)
    SCHEDULER_ENABLED = os.getenv("SCHEDULER_ENABLED", "1") == "1"
    PURGE_ON_STARTUP = os.getenv("PURGE_ON_STARTUP", "1") == "1"
    PURGE_CRON_HOUR = int(os.getenv("PURGE_CRON_HOUR", "0"))
    PURGE_CRON_MINUTE = int(os.getenv("PURGE_CRON_MINUTE", "0"))

    # migration kullanılmıyorsa tabloları açılışta oluştur
    AUTO_CREATE_TABLES = os.getenv("AUTO_CREATE_TABLES", "1") == "1"
