"""Sample note generation for filling a project with realistic-looking data."""

import logging
import random
import time
from typing import Callable, Optional, Tuple, TypeVar

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from unfold_note.app.core.url_id import UrlIdGenerationError
from unfold_note.app.models.project import Project
from unfold_note.app.services.notes import create_note

logger = logging.getLogger(__name__)

T = TypeVar("T")

DEFAULT_NOTE_COUNT = 120
BATCH_SIZE = 10

SAMPLE_TAGS = [
    "ideas", "work", "personal", "project", "meeting", "memo", "task",
    "learning", "reading", "travel", "cooking", "health", "tech", "programming",
    "Python", "FastAPI", "SQLAlchemy", "pytest", "design", "UI_UX",
]

TITLE_TEMPLATES = [
    "Thoughts on {tag}",
    "{tag} project status",
    "{tag} study notes",
    "Ideas about {tag}",
    "{tag} meeting notes",
    "How to implement {tag}",
    "{tag} cheat sheet",
    "{tag} best practices",
    "{tag}: problems and fixes",
    "Where {tag} is heading",
]

CONTENT_TEMPLATES = [
    "<h1>{title}</h1>"
    "<h2>Summary</h2><p>Key points about {tag}.</p><p>#{tag} #memo</p>"
    "<h2>Details</h2><ul><li>The basic idea behind {tag}</li>"
    "<li>Things to watch in practice</li><li>Where else it applies</li></ul>"
    "<h2>Next steps</h2><ul><li>Research {tag} further</li><li>Try it out</li>"
    "<li>Collect feedback</li></ul>",
    "<h1>{title}</h1>"
    "<p>Spent some time thinking about {tag} today.</p><p>#{tag} #ideas</p>"
    "<h2>Main points</h2><ol><li>Where {tag} stands now</li><li>Open problems</li>"
    "<li>Possible improvements</li></ol>",
    "<h1>{title}</h1>"
    "<p>Learning log for {tag}.</p><p>#{tag} #learning</p>"
    "<h2>What I learned</h2><ul><li>Core concepts</li><li>Practical usage</li>"
    "<li>Advanced techniques</li></ul>"
    "<h2>Open questions</h2><ul><li>What is the best way to use {tag}?</li>"
    "<li>How does it combine with other tools?</li></ul>",
    "<h1>{title}</h1>"
    "<p>Progress report for {tag}.</p><p>#{tag} #project</p>"
    "<h2>Status</h2><ul><li>Phase 1: done</li><li>Phase 2: in progress (80%)</li>"
    "<li>Phase 3: not started</li></ul>"
    "<h2>Next actions</h2><ul><li>Team meeting</li><li>Rebalance resources</li>"
    "<li>Revisit the schedule</li></ul>",
    "<h1>{title}</h1>"
    "<p>Technical memo on {tag}.</p><p>#{tag} #tech #memo</p>"
    "<h2>Example</h2><pre><code>def example():\n    print(\"{tag}\")</code></pre>"
    "<h2>Caveats</h2><ul><li>Performance impact</li><li>Compatibility</li>"
    "<li>Security</li></ul>",
]


def with_retry(
    fn: Callable[[], T],
    max_retries: int = 3,
    delay: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
) -> T:
    """Call ``fn`` until it succeeds, waiting ``delay * 2**attempt`` seconds between tries."""
    if max_retries < 1:
        raise ValueError("max_retries must be at least 1")
    last_error: Optional[Exception] = None
    for attempt in range(max_retries):
        try:
            return fn()
        except Exception as exc:
            last_error = exc
            if attempt < max_retries - 1:
                wait_time = delay * (2 ** attempt)
                logger.warning("Retry %d/%d in %.1fs: %s", attempt + 1, max_retries, wait_time, exc)
                sleep(wait_time)
    raise last_error


def generate_random_title(rng: random.Random) -> str:
    return rng.choice(TITLE_TEMPLATES).format(tag=rng.choice(SAMPLE_TAGS))


def generate_random_content(title: str, rng: random.Random) -> str:
    return rng.choice(CONTENT_TEMPLATES).format(title=title, tag=rng.choice(SAMPLE_TAGS))


def generate_sample_notes(
    db: Session,
    project: Project,
    count: int = DEFAULT_NOTE_COUNT,
    rng: Optional[random.Random] = None,
    retry_delay: float = 1.0,
    sleep: Callable[[float], None] = time.sleep,
) -> Tuple[int, int]:
    """Create ``count`` notes in ``project``; returns (succeeded, failed)."""
    rng = rng or random.Random()
    logger.info("Generating %d sample notes in project %s", count, project.url_id)

    success_count = 0
    error_count = 0
    batches = (count + BATCH_SIZE - 1) // BATCH_SIZE
    for batch_index in range(batches):
        batch_count = min(BATCH_SIZE, count - batch_index * BATCH_SIZE)
        for _ in range(batch_count):
            title = generate_random_title(rng)
            content = generate_random_content(title, rng)

            def insert(title=title, content=content):
                try:
                    return create_note(db, project, title, content)
                except SQLAlchemyError:
                    db.rollback()
                    raise

            try:
                with_retry(insert, max_retries=3, delay=retry_delay, sleep=sleep)
                success_count += 1
            except (SQLAlchemyError, UrlIdGenerationError):
                logger.exception("Failed generating sample note %r", title)
                error_count += 1
        logger.info(
            "Batch %d/%d done: succeeded=%d failed=%d",
            batch_index + 1, batches, success_count, error_count,
        )

    logger.info("Sample notes: total=%d succeeded=%d failed=%d", count, success_count, error_count)
    return success_count, error_count
