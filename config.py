# config.py
import os


class Config:
    DEBUG = False
    TESTING = False
    WASTE_DATA_PATH = os.getenv("WASTE_DATA_PATH", "data/waste.json")   # relative to project root
    TIMEZONE = "Europe/Prague"


class ProductionConfig(Config):
    pass


class DevelopmentConfig(Config):
    DEBUG = True


class TestingConfig(Config):
    TESTING = True
    DEBUG = True
