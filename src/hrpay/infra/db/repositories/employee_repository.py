"""Repository for the employee directory. No business logic; caller owns the transaction."""
from __future__ import annotations
from sqlalchemy import func, or_
from sqlmodel import Session, select
from hrpay.models.employee import Employee, Department, JobPosition


class EmployeeRepository:
    def __init__(self, session: Session) -> None:
        self._s = session

    # --- Employees ---

    def get_by_id(self, employee_id: int) -> Employee | None:
        return self._s.get(Employee, employee_id)

    def get_by_number(self, employee_number: str) -> Employee | None:
        return self._s.exec(
            select(Employee).where(Employee.employee_number == employee_number)
        ).first()

    def _filtered(self, stmt, *, is_active: bool | None, department_id: int | None, search: str | None):
        if is_active is not None:
            stmt = stmt.where(Employee.is_active == is_active)
        if department_id is not None:
            stmt = stmt.where(Employee.department_id == department_id)
        if search:
            pattern = f"%{search.strip()}%"
            stmt = stmt.where(or_(
                Employee.name.ilike(pattern),
                Employee.employee_number.ilike(pattern),
                Employee.email.ilike(pattern),
            ))
        return stmt

    def list_all(
        self, *, is_active: bool | None = None, department_id: int | None = None,
        search: str | None = None, limit: int = 100, offset: int = 0,
    ) -> list[Employee]:
        stmt = self._filtered(
            select(Employee), is_active=is_active, department_id=department_id, search=search,
        )
        return list(self._s.exec(stmt.order_by(Employee.id).offset(offset).limit(limit)).all())

    def count(
        self, *, is_active: bool | None = None, department_id: int | None = None,
        search: str | None = None,
    ) -> int:
        stmt = self._filtered(
            select(func.count()).select_from(Employee),
            is_active=is_active, department_id=department_id, search=search,
        )
        return self._s.exec(stmt).one()

    def list_active(self) -> list[Employee]:
        return list(self._s.exec(
            select(Employee).where(Employee.is_active == True).order_by(Employee.id)  # noqa: E712
        ).all())

    def create(self, **fields) -> Employee:
        employee = Employee(**fields)
        self._s.add(employee)
        self._s.flush()  # get generated PK without committing
        return employee

    # --- Departments ---

    def get_department(self, department_id: int) -> Department | None:
        return self._s.get(Department, department_id)

    def get_department_by_code(self, code: str) -> Department | None:
        return self._s.exec(select(Department).where(Department.code == code)).first()

    def list_departments(self) -> list[Department]:
        return list(self._s.exec(select(Department).order_by(Department.name)).all())

    def create_department(self, *, name: str, code: str) -> Department:
        dept = Department(name=name, code=code)
        self._s.add(dept)
        self._s.flush()
        return dept

    # --- Job positions ---

    def get_position(self, position_id: int) -> JobPosition | None:
        return self._s.get(JobPosition, position_id)

    def get_position_by_code(self, code: str) -> JobPosition | None:
        return self._s.exec(select(JobPosition).where(JobPosition.code == code)).first()

    def list_positions(self, department_id: int | None = None) -> list[JobPosition]:
        stmt = select(JobPosition)
        if department_id is not None:
            stmt = stmt.where(JobPosition.department_id == department_id)
        return list(self._s.exec(stmt.order_by(JobPosition.title)).all())

    def create_position(self, *, title: str, code: str, department_id: int | None) -> JobPosition:
        pos = JobPosition(title=title, code=code, department_id=department_id)
        self._s.add(pos)
        self._s.flush()
        return pos
