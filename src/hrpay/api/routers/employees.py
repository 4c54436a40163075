"""Employee directory endpoints."""
from fastapi import APIRouter, Depends
from hrpay.api.deps import get_uow
from hrpay.api.schemas.employees import (
    EmployeeCreate, EmployeeUpdate, EmployeeRead, EmployeeList,
    DepartmentCreate, DepartmentRead, JobPositionCreate, JobPositionRead,
)
from hrpay.infra.db.uow import UnitOfWork
from hrpay.services.employees_service import EmployeesService

router = APIRouter(tags=["employees"])


@router.get("/employees", response_model=EmployeeList)
def list_employees(
    is_active: bool | None = None,
    department_id: int | None = None,
    search: str | None = None,
    limit: int = 100,
    offset: int = 0,
    uow: UnitOfWork = Depends(get_uow),
) -> EmployeeList:
    return EmployeesService(uow).list_employees(
        is_active=is_active, department_id=department_id, search=search,
        limit=limit, offset=offset,
    )


@router.post("/employees", response_model=EmployeeRead, status_code=201)
def create_employee(payload: EmployeeCreate, uow: UnitOfWork = Depends(get_uow)) -> EmployeeRead:
    return EmployeesService(uow).create_employee(payload)


@router.get("/employees/{employee_id}", response_model=EmployeeRead)
def get_employee(employee_id: int, uow: UnitOfWork = Depends(get_uow)) -> EmployeeRead:
    return EmployeesService(uow).get_employee(employee_id)


@router.patch("/employees/{employee_id}", response_model=EmployeeRead)
def update_employee(
    employee_id: int, payload: EmployeeUpdate, uow: UnitOfWork = Depends(get_uow),
) -> EmployeeRead:
    return EmployeesService(uow).update_employee(employee_id, payload)


@router.get("/departments", response_model=list[DepartmentRead])
def list_departments(uow: UnitOfWork = Depends(get_uow)) -> list[DepartmentRead]:
    return EmployeesService(uow).list_departments()


@router.post("/departments", response_model=DepartmentRead, status_code=201)
def create_department(payload: DepartmentCreate, uow: UnitOfWork = Depends(get_uow)) -> DepartmentRead:
    return EmployeesService(uow).create_department(payload)


@router.get("/job-positions", response_model=list[JobPositionRead])
def list_positions(
    department_id: int | None = None, uow: UnitOfWork = Depends(get_uow),
) -> list[JobPositionRead]:
    return EmployeesService(uow).list_positions(department_id)


@router.post("/job-positions", response_model=JobPositionRead, status_code=201)
def create_position(payload: JobPositionCreate, uow: UnitOfWork = Depends(get_uow)) -> JobPositionRead:
    return EmployeesService(uow).create_position(payload)
