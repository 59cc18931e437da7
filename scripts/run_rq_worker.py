"""Run an RQ worker for the AI evaluation queue inside the Flask app context.

Usage:
  source .venv/bin/activate
  python scripts/run_rq_worker.py            # long-running
  python scripts/run_rq_worker.py --burst    # drain the queue and exit

Evaluation jobs read `current_app.config` and use the Flask-SQLAlchemy
session, so the app is created once here and its context stays pushed for
the worker's lifetime.
"""

import sys
import os

# Ensure project root is on sys.path when running from scripts/ or other cwd
ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
  sys.path.insert(0, ROOT)

from app import create_app
from app.extensions import rq
from rq import Worker


def main(argv):
  app = create_app()
  if rq.queue is None:
    app.logger.error('Redis is not reachable at %s; nothing to work on', app.config.get('REDIS_URL'))
    return 1
  burst = '--burst' in argv
  with app.app_context():
    worker = Worker([rq.queue], connection=rq.redis)
    app.logger.info('RQ worker on queue %r (pid %s, burst=%s)', rq.queue.name, os.getpid(), burst)
    worker.work(burst=burst, logging_level=app.config.get('LOG_LEVEL', 'INFO'))
  return 0


if __name__ == '__main__':
  sys.exit(main(sys.argv[1:]))
