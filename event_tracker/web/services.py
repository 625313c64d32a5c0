"""Dependencies shared by the request handlers."""

from dataclasses import dataclass

from flask import current_app

from event_tracker.config.environment import EnvironmentConfig
from event_tracker.persistence.repositories import EventRepository, MetadataRepository
from event_tracker.pipeline.runner import ScanPipeline

EXTENSION_KEY = "event_tracker"


@dataclass
class Services:
    """Objects the request handlers work with."""

    pipeline: ScanPipeline
    events: EventRepository
    metadata: MetadataRepository
    env_config: EnvironmentConfig


def get_services() -> Services:
    return current_app.extensions[EXTENSION_KEY]
