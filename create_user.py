from app import create_app
from extensions import db
from models import Role, User
from security import hash_password
from validation import validate_password

app = create_app()

def create_user(username, password, role, name=None, email=None):
    with app.app_context():
        # username must be unique
        existing_user = User.query.filter_by(username=username).first()
        if existing_user:
            print(f"⚠️  User '{username}' already exists with role '{existing_user.role.value}'.")
            return

        error = validate_password(password)
        if error:
            print(f"❌ {error}")
            return

        user = User(
            name=name,
            username=username,
            email=email,
            password=hash_password(password),
            role=Role.parse(role),
        )
        db.session.add(user)
        db.session.commit()
        print(f"✅ Created user: {username} (role: {user.role.value})")

if __name__ == '__main__':
    import argparse

    parser = argparse.ArgumentParser(description='Create a new user.')
    parser.add_argument('username', help='Username')
    parser.add_argument('password', help='Password')
    parser.add_argument('role', choices=[r.value for r in Role], help='User role')
    parser.add_argument('--name', help='Full name')
    parser.add_argument('--email', help='E-mail')

    args = parser.parse_args()
    create_user(args.username, args.password, args.role, args.name, args.email)
