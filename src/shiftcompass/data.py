import os
import sqlite3
from datetime import date
from typing import List, Optional, Union
from shiftcompass.models import EventType, LeaveType, ManualLeave, ShiftEvent
import logging


class Database:
    """
    sqlite-Speicher für Urlaube, Schicht-Ereignisse und einen kleinen
    Schlüssel-Wert-Bereich. Erfüllt LeaveProvider, EventAdjustmentProvider
    und KeyValueStore.
    """

    def __init__(self, db_path: str = None):
        try:
            self.db_path = db_path or os.path.join(os.path.expanduser("~"), ".shiftcompass", "shiftcompass.db")
            if self.db_path != ':memory:':
                os.makedirs(os.path.dirname(os.path.abspath(self.db_path)), exist_ok=True)
            self.conn = sqlite3.connect(self.db_path)
            self.conn.row_factory = sqlite3.Row
            self._ensure_tables()
        except Exception as e:
            logging.error(f"Database connection error: {e}")
            raise

    def _ensure_tables(self):
        cur = self.conn.cursor()
        # Urlaube, Zeitraum inklusive
        cur.execute("""
        CREATE TABLE IF NOT EXISTS leaves (
          id INTEGER PRIMARY KEY AUTOINCREMENT,
          start_date TEXT NOT NULL,
          end_date TEXT NOT NULL,
          type TEXT NOT NULL,
          note TEXT
        )""")

        # Verspätungen, früher Feierabend, Überstunden
        cur.execute("""
        CREATE TABLE IF NOT EXISTS shift_events (
          id TEXT PRIMARY KEY,
          day TEXT NOT NULL,
          type TEXT NOT NULL,
          duration_minutes INTEGER NOT NULL,
          note TEXT NOT NULL DEFAULT '',
          is_ignored INTEGER NOT NULL DEFAULT 0
        )""")

        # Schlüssel-Wert (z.B. letzte bekannte Zeitzone); kind = 'str' | 'int'
        cur.execute("""
        CREATE TABLE IF NOT EXISTS key_value (
          key TEXT PRIMARY KEY,
          value TEXT NOT NULL,
          kind TEXT NOT NULL
        )""")

        self.conn.commit()

    # Export
    def export_to_sql(self, filename: str):
        """Dump aller Tabellen als SQL-Statements"""
        with open(filename, 'w', encoding='utf-8') as f:
            for line in self.conn.iterdump():
                f.write(f"{line}\n")

    # Urlaub-Methoden
    def _row_to_leave(self, row) -> ManualLeave:
        lv = ManualLeave(
            date.fromisoformat(row['start_date']),
            date.fromisoformat(row['end_date']),
            LeaveType(row['type']),
            row['note'],
        )
        lv.id = row['id']
        return lv

    def load_leaves(self) -> List[ManualLeave]:
        cur = self.conn.cursor()
        cur.execute("SELECT id, start_date, end_date, type, note FROM leaves ORDER BY start_date, id")
        return [self._row_to_leave(row) for row in cur.fetchall()]

    def save_leave(self, lv: ManualLeave):
        sd = lv.start_date.isoformat()
        ed = lv.end_date.isoformat()
        typ = LeaveType(lv.type).value
        cur = self.conn.cursor()
        if lv.id is not None:
            cur.execute(
                "UPDATE leaves SET start_date=?, end_date=?, type=?, note=? WHERE id=?",
                (sd, ed, typ, lv.note, lv.id)
            )
        else:
            cur.execute(
                "INSERT INTO leaves (start_date, end_date, type, note) VALUES (?,?,?,?)",
                (sd, ed, typ, lv.note)
            )
            lv.id = cur.lastrowid
        self.conn.commit()
        logging.debug(f"Urlaub gespeichert id={lv.id}")

    def delete_leave(self, leave_id: int):
        cur = self.conn.cursor()
        cur.execute("DELETE FROM leaves WHERE id=?", (leave_id,))
        self.conn.commit()

    def get_leave(self, day: date) -> Optional[ManualLeave]:
        cur = self.conn.cursor()
        iso = day.isoformat()
        cur.execute(
            "SELECT id, start_date, end_date, type, note FROM leaves "
            "WHERE start_date <= ? AND end_date >= ? ORDER BY id LIMIT 1",
            (iso, iso)
        )
        row = cur.fetchone()
        return self._row_to_leave(row) if row else None

    # Ereignis-Methoden
    def load_events(self, day: Optional[date] = None) -> List[ShiftEvent]:
        cur = self.conn.cursor()
        query = "SELECT id, day, type, duration_minutes, note, is_ignored FROM shift_events"
        params = []
        if day is not None:
            query += " WHERE day = ?"
            params.append(day.isoformat())
        cur.execute(query + " ORDER BY day, id", params)
        out = []
        for row in cur.fetchall():
            out.append(ShiftEvent(
                day=date.fromisoformat(row['day']),
                type=EventType(row['type']),
                duration_minutes=row['duration_minutes'],
                note=row['note'],
                is_ignored=bool(row['is_ignored']),
                id=row['id'],
            ))
        return out

    def save_event(self, ev: ShiftEvent):
        cur = self.conn.cursor()
        cur.execute(
            "REPLACE INTO shift_events (id, day, type, duration_minutes, note, is_ignored) VALUES (?,?,?,?,?,?)",
            (ev.id, ev.day.isoformat(), EventType(ev.type).value, ev.duration_minutes, ev.note, int(ev.is_ignored))
        )
        self.conn.commit()

    def delete_event(self, event_id: str):
        cur = self.conn.cursor()
        cur.execute("DELETE FROM shift_events WHERE id=?", (event_id,))
        self.conn.commit()

    def net_minutes_adjustment(self, day: date) -> int:
        return sum(ev.effective_minutes for ev in self.load_events(day))

    # Schlüssel-Wert-Methoden
    def get(self, key: str) -> Optional[Union[str, int]]:
        cur = self.conn.cursor()
        cur.execute("SELECT value, kind FROM key_value WHERE key=?", (key,))
        row = cur.fetchone()
        if row is None:
            return None
        if row['kind'] == 'int':
            return int(row['value'])
        return row['value']

    def set(self, key: str, value: Union[str, int]):
        kind = 'int' if isinstance(value, int) and not isinstance(value, bool) else 'str'
        cur = self.conn.cursor()
        cur.execute(
            "REPLACE INTO key_value (key, value, kind) VALUES (?,?,?)",
            (key, str(value), kind)
        )
        self.conn.commit()

    def remove(self, key: str):
        cur = self.conn.cursor()
        cur.execute("DELETE FROM key_value WHERE key=?", (key,))
        self.conn.commit()

    def close(self):
        """Schließe die Datenbankverbindung sauber"""
        if self.conn:
            self.conn.close()
            self.conn = None
