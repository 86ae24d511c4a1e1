"""Configuration for the salon scheduling core.

Business data is centralized here - modify as needed without touching code.
Environment settings are read once at import, after loading a local .env file.
"""
import os
from dotenv import load_dotenv

load_dotenv()

# Slot grid granularity (minutes)
SLOT_INTERVAL_MINUTES = 30

# Slots starting before this hour count as "morning"
MORNING_CUTOFF_HOUR = 12

SERVICES = [
    {
        "id": "s1",
        "name": "Corte Social",
        "duration_minutes": 30,
        "price": 50.0,
        "description": "Corte tradicional com acabamento fino."
    },
    {
        "id": "s2",
        "name": "Barba Completa",
        "duration_minutes": 30,
        "price": 40.0,
        "description": "Toalha quente e alinhamento com navalha."
    },
    {
        "id": "s3",
        "name": "Combo Premium",
        "duration_minutes": 60,
        "price": 80.0,
        "description": "Corte + Barba + Lavagem especial."
    },
]

PROFESSIONALS = [
    {
        "kind": "staff",
        "id": "b1",
        "name": 'Arthur "The Blade"',
        "phone": "5511912345678",
        "email": "arthur@barber.com",
        "pin": "1234",
        "address": "Rua das Navalhas, 120 - Centro, Sao Paulo",
        "operating_days": "Segunda a Sexta",
        "specialties": ["Corte Classico", "Barba Terapia"],
        "schedule": {
            "work_start": "09:00",
            "work_end": "19:00",
            "break_start": "12:00",
            "break_end": "13:00"
        }
    },
    {
        "kind": "staff",
        "id": "b2",
        "name": 'Vitor "Fade Master"',
        "phone": "5511998765432",
        "email": "vitor@barber.com",
        "pin": "1234",
        "address": "Av. do Degrade, 500 - Jardim America, Sao Paulo",
        "operating_days": "Terca a Sabado",
        "specialties": ["Degrade Moderno", "Platinado"],
        "schedule": {
            "work_start": "10:00",
            "work_end": "20:00",
            "break_start": "14:00",
            "break_end": "15:00"
        }
    },
]

# Environment
DATABASE_URL = os.getenv("DATABASE_URL", "sqlite:///appointments.db")
LOG_LEVEL = os.getenv("LOG_LEVEL", "INFO")
CATALOG_DIR = os.getenv("CATALOG_DIR")
CATALOG_NAME = os.getenv("CATALOG_NAME", "default")
