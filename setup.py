from setuptools import setup, find_packages

setup(
    name="clinicbook",
    version="0.1.0",
    packages=find_packages(exclude=["tests", "tests.*", "alembic", "alembic.*"]),
    install_requires=[
        "fastapi",
        "uvicorn",
        "sqlalchemy>=2.0",
        "alembic",
        "psycopg2-binary",
        "python-jose[cryptography]",
        "passlib[bcrypt]",
        "bcrypt>=4.0,<5",
        "python-multipart",
        "python-dotenv",
        "pydantic[email]>=2",
        "pydantic-settings",
        "boto3",
        "httpx",
        "razorpay",
        "stripe>=8",
    ],
    extras_require={
        "test": [
            "pytest",
            "httpx",
        ],
    },
)
