"""Employee directory use-case service."""
from __future__ import annotations
from hrpay.domain.exceptions import ConflictError, EmployeeNotFound, NotFoundError
from hrpay.infra.db.uow import UnitOfWork
from hrpay.infra.db.repositories.employee_repository import EmployeeRepository
from hrpay.api.schemas.employees import (
    EmployeeCreate, EmployeeUpdate, EmployeeRead, EmployeeList,
    DepartmentCreate, DepartmentRead, JobPositionCreate, JobPositionRead,
)


class EmployeesService:
    def __init__(self, uow: UnitOfWork) -> None:
        self._uow = uow

    @property
    def _repo(self) -> EmployeeRepository:
        return EmployeeRepository(self._uow.session)

    def _check_refs(self, department_id: int | None, position_id: int | None) -> None:
        if department_id is not None and self._repo.get_department(department_id) is None:
            raise NotFoundError(f"Department {department_id} not found")
        if position_id is not None and self._repo.get_position(position_id) is None:
            raise NotFoundError(f"Job position {position_id} not found")

    # --- Employees ---

    def create_employee(self, payload: EmployeeCreate) -> EmployeeRead:
        repo = self._repo
        if repo.get_by_number(payload.employee_number) is not None:
            raise ConflictError(f"Employee number {payload.employee_number} already exists")
        self._check_refs(payload.department_id, payload.position_id)
        employee = repo.create(**payload.model_dump())
        self._uow.commit()
        return EmployeeRead.model_validate(employee)

    def list_employees(
        self, is_active: bool | None = None, department_id: int | None = None,
        search: str | None = None, limit: int = 100, offset: int = 0,
    ) -> EmployeeList:
        repo = self._repo
        criteria = dict(is_active=is_active, department_id=department_id, search=search)
        employees = repo.list_all(limit=limit, offset=offset, **criteria)
        return EmployeeList(
            items=[EmployeeRead.model_validate(e) for e in employees],
            total=repo.count(**criteria),
        )

    def get_employee(self, employee_id: int) -> EmployeeRead:
        employee = self._repo.get_by_id(employee_id)
        if employee is None:
            raise EmployeeNotFound(f"Employee {employee_id} not found")
        return EmployeeRead.model_validate(employee)

    def update_employee(self, employee_id: int, payload: EmployeeUpdate) -> EmployeeRead:
        """Edits the live record only; generated payroll items keep their snapshot."""
        employee = self._repo.get_by_id(employee_id)
        if employee is None:
            raise EmployeeNotFound(f"Employee {employee_id} not found")
        changes = payload.model_dump(exclude_unset=True)
        self._check_refs(changes.get("department_id"), changes.get("position_id"))
        for field, value in changes.items():
            setattr(employee, field, value)
        self._uow.session.add(employee)
        self._uow.commit()
        return EmployeeRead.model_validate(employee)

    # --- Departments / positions ---

    def list_departments(self) -> list[DepartmentRead]:
        return [DepartmentRead.model_validate(d) for d in self._repo.list_departments()]

    def create_department(self, payload: DepartmentCreate) -> DepartmentRead:
        if self._repo.get_department_by_code(payload.code) is not None:
            raise ConflictError(f"Department code {payload.code} already exists")
        dept = self._repo.create_department(name=payload.name, code=payload.code)
        self._uow.commit()
        return DepartmentRead.model_validate(dept)

    def list_positions(self, department_id: int | None = None) -> list[JobPositionRead]:
        return [JobPositionRead.model_validate(p) for p in self._repo.list_positions(department_id)]

    def create_position(self, payload: JobPositionCreate) -> JobPositionRead:
        if self._repo.get_position_by_code(payload.code) is not None:
            raise ConflictError(f"Job position code {payload.code} already exists")
        self._check_refs(payload.department_id, None)
        pos = self._repo.create_position(
            title=payload.title, code=payload.code, department_id=payload.department_id,
        )
        self._uow.commit()
        return JobPositionRead.model_validate(pos)
