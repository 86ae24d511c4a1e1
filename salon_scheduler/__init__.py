"""Salon appointment scheduling core: availability, conflict guard and status lifecycle."""
