"""Create (or reset) a staff account and list it in the admins table.

Usage:
  python scripts/create_admin.py admin@example.com 'a-strong-password'
"""

import sys
import os

ROOT = os.path.dirname(os.path.dirname(os.path.abspath(__file__)))
if ROOT not in sys.path:
  sys.path.insert(0, ROOT)

from app import create_app
from app.extensions import db
from app.models import Admin, User


def create_admin(email, password):
  email = email.strip().lower()
  user = User.query.filter_by(email=email).first()
  if user is None:
    user = User(email=email, role='admin')
    db.session.add(user)
  user.role = 'admin'
  user.set_password(password)
  if Admin.query.filter_by(email=email).first() is None:
    db.session.add(Admin(email=email))
  db.session.commit()
  return user


def main():
  if len(sys.argv) != 3:
    sys.exit('usage: create_admin.py EMAIL PASSWORD')
  app = create_app()
  with app.app_context():
    user = create_admin(sys.argv[1], sys.argv[2])
    app.logger.warning('admin ready: %s (id=%s)', user.email, user.id)


if __name__ == '__main__':
  main()
