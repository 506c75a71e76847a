"""Example: use the service layer directly (no Flask).

Seeds an in-memory store, then prints the frequency report of the first class as CSV.
"""

import random

from student_records.attendance.model import SemesterPeriod
from student_records.container import build_container
from student_records.reports.csv_exporter import render_csv
from student_records.seed.sample_data import seed_sample_data


def main():
    container = build_container(storage_backend="memory")
    seed_sample_data(container.store, with_attendance=True, rng=random.Random(7))

    first = container.store.get_classes()[0]
    report = container.frequency_report_service.generate_frequency_report(
        first.id, SemesterPeriod(label=first.semester)
    )
    print(render_csv(report))


if __name__ == "__main__":
    main()
