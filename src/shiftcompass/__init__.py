"""Schichtrotation, Arbeitszeit-Statistik und Zeitzonen-/Sommerzeit-Prüfung."""
