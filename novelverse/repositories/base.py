from typing import Any, Dict, Generic, List, Optional, Type, TypeVar

from pydantic import BaseModel
from sqlalchemy.orm import Query, Session

ModelType = TypeVar("ModelType")
SchemaType = TypeVar("SchemaType", bound=BaseModel)


class BaseRepository(Generic[ModelType, SchemaType]):
    """ORM 모델 <-> Pydantic 스키마 변환을 담당하는 공통 리포지토리

    조회 결과는 항상 스키마로 반환한다. commit=False 로 호출하면 flush 만 하고
    트랜잭션 경계는 호출자(서비스)가 가진다.
    """

    def __init__(
        self, model_class: Type[ModelType], schema_class: Type[SchemaType], db: Session
    ):
        self.model_class = model_class
        self.schema_class = schema_class
        self.db = db

    def _to_schema(self, instance: Any) -> Optional[SchemaType]:
        if instance is None:
            return None
        return self.schema_class.model_validate(instance)

    def _to_schemas(self, instances: List[Any]) -> List[SchemaType]:
        return [self._to_schema(instance) for instance in instances]

    def _query(self, filters: Optional[Dict[str, Any]] = None) -> Query:
        query = self.db.query(self.model_class)
        for field_name, value in (filters or {}).items():
            query = query.filter(getattr(self.model_class, field_name) == value)
        return query

    def _get_model(self, id: Any) -> Optional[ModelType]:
        return self.db.get(self.model_class, id)

    def _commit(self, commit: bool) -> None:
        try:
            self.db.flush()
            if commit:
                self.db.commit()
        except Exception:
            self.db.rollback()
            raise

    def get_by_id(self, id: Any) -> Optional[SchemaType]:
        return self._to_schema(self._get_model(id))

    def get_by_field(self, field_name: str, value: Any) -> Optional[SchemaType]:
        return self._to_schema(self._query({field_name: value}).first())

    def create(self, commit: bool = True, **kwargs) -> SchemaType:
        instance = self.model_class(**kwargs)
        self.db.add(instance)
        self._commit(commit)
        self.db.refresh(instance)
        return self._to_schema(instance)

    def update(
        self, instance_id: Any, commit: bool = True, **kwargs
    ) -> Optional[SchemaType]:
        """대상이 없으면 None. 모델에 없는 필드는 무시"""
        instance = self._get_model(instance_id)
        if instance is None:
            return None

        for key, value in kwargs.items():
            if hasattr(instance, key):
                setattr(instance, key, value)

        self._commit(commit)
        self.db.refresh(instance)
        return self._to_schema(instance)

    def delete(self, instance_id: Any, commit: bool = True) -> bool:
        instance = self._get_model(instance_id)
        if instance is None:
            return False

        self.db.delete(instance)
        self._commit(commit)
        return True

    def count(self, filters: Optional[Dict[str, Any]] = None) -> int:
        return self._query(filters).count()
