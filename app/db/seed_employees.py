"""
Create tables and seed an employee for local development.

Identity is owned by an external service, so this also prints a bearer token
for the seeded employee that the API will accept:

  python -m app.db.seed_employees --email hr@example.com --role rrhh --first-name Ana --last-name Ruiz
"""
import argparse
import asyncio

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession

from app.auth.security import create_access_token
from app.core.enums import Role
from app.core.models import Employee
from app.db.session import AsyncSessionLocal, init_db


async def seed_employee(
    db: AsyncSession,
    email: str,
    role: Role,
    first_name: str,
    last_name: str,
    department: str = None,
) -> Employee:
    result = await db.execute(select(Employee).where(Employee.email == email))
    employee = result.scalar_one_or_none()
    if not employee:
        employee = Employee(
            first_name=first_name,
            last_name=last_name,
            email=email,
            role=role.value,
            department=department,
            is_active=True,
        )
        db.add(employee)
        print("Created employee:", email)
    else:
        employee.role = role.value
        employee.is_active = True
        print("Updated existing employee:", email)
    await db.commit()
    await db.refresh(employee)
    return employee


async def main(args: argparse.Namespace) -> None:
    await init_db()
    async with AsyncSessionLocal() as db:
        try:
            employee = await seed_employee(
                db,
                email=args.email,
                role=Role(args.role),
                first_name=args.first_name,
                last_name=args.last_name,
                department=args.department,
            )
        except Exception as e:
            await db.rollback()
            print("Error:", e)
            raise
    token = create_access_token(subject={"userId": str(employee.id), "role": employee.role})
    print("Employee id:", employee.id)
    print("Access token:", token)


if __name__ == "__main__":
    parser = argparse.ArgumentParser(description="Seed an employee and print an access token.")
    parser.add_argument("--email", required=True)
    parser.add_argument("--role", choices=[r.value for r in Role], default=Role.EMPLOYEE.value)
    parser.add_argument("--first-name", default="Admin")
    parser.add_argument("--last-name", default="User")
    parser.add_argument("--department", default=None)
    asyncio.run(main(parser.parse_args()))
