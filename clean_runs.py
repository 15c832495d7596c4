"""
Clean Runs — usuwa historie uruchomien scenariuszy.

Usuwa:
- suite_runs, scenario_runs
- logi z katalogu logs/

Użycie:
    python clean_runs.py              # interaktywne potwierdzenie
    python clean_runs.py --force      # bez pytania
    python clean_runs.py --keep-logs  # nie usuwaj logów
"""

import sys
from pathlib import Path
from database import SessionLocal, init_db
from app.models.run import ScenarioRun
from app.models.suite_run import SuiteRun


def clean_runs(force: bool = False, keep_logs: bool = False, logs_dir: str = "logs") -> dict[str, int]:
    """Usuwa wszystkie runy i zwraca liczby usuniętych rekordów."""

    if not force:
        print("⚠️  UWAGA: To usunie cała historię uruchomień!")
        confirm = input("Czy kontynuować? (yes/no): ")
        if confirm.lower() not in ['yes', 'y']:
            print("Anulowano.")
            return {}

    init_db()
    db = SessionLocal()

    try:
        print("\n🗑️  Usuwanie runów...")

        # Kolejność ważna — od zależnych do głównych
        counts = {
            'scenario_runs': db.query(ScenarioRun).delete(),
            'suite_runs': db.query(SuiteRun).delete(),
        }
        db.commit()

        print("\n📊 Usunięte rekordy:")
        for table, count in counts.items():
            print(f"   {table}: {count}")

        if not keep_logs:
            log_path = Path(logs_dir)
            if log_path.exists():
                log_files = list(log_path.glob("*.log"))
                for log_file in log_files:
                    log_file.unlink()
                print(f"\n🗑️  Usunięto {len(log_files)} plików logów")

        print("\n✅ Runy wyczyszczone!")
        return counts

    except Exception as e:
        db.rollback()
        print(f"\n❌ Błąd: {e}")
        raise
    finally:
        db.close()


if __name__ == "__main__":
    force = "--force" in sys.argv or "-f" in sys.argv
    keep_logs = "--keep-logs" in sys.argv

    clean_runs(force=force, keep_logs=keep_logs)
