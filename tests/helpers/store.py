"""Seeding helpers for repository-backed tests."""


def seed_events(repo, events):
    """Write events straight to the repository's data file."""
    repo.store.write([event.to_record() for event in events])
