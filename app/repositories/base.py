"""Base repository class with common CRUD operations."""

import logging
from abc import ABC
from typing import Generic, TypeVar, Type, Optional, List, Any, Dict
from sqlalchemy.orm import Session
from sqlalchemy.exc import SQLAlchemyError

from app.db.base_class import Base

ModelType = TypeVar("ModelType", bound=Base)


class BaseRepository(Generic[ModelType], ABC):
    """Base repository class providing common CRUD operations.
    
    Provides:
    - Standard CRUD operations (Create, Read, Update, Delete)
    - Query filtering and pagination
    - Structured logging for data operations
    
    Repositories only flush; committing is the calling service's job.
    """
    
    def __init__(self, db: Session, model: Type[ModelType], correlation_id: Optional[str] = None):
        """Initialize repository with database session and model type.
        
        Args:
            db: SQLAlchemy database session
            model: SQLAlchemy model class
            correlation_id: Optional request correlation ID for logging
        """
        self.db = db
        self.model = model
        self.correlation_id = correlation_id
        self.logger = logging.getLogger(self.__class__.__name__)
    
    def create(self, obj_in: Any, **kwargs: Any) -> ModelType:
        """Create a new record in the database.
        
        Args:
            obj_in: Pydantic model or dict with creation data
            **kwargs: Additional fields to set on the model
            
        Returns:
            Created model instance
            
        Raises:
            SQLAlchemyError: On database operation failure
        """
        try:
            if hasattr(obj_in, 'model_dump'):
                obj_data = obj_in.model_dump(exclude_unset=True)
            else:
                obj_data = dict(obj_in)
            
            obj_data.update(kwargs)
            db_obj = self.model(**obj_data)
            
            self.db.add(db_obj)
            self.db.flush()
            self.db.refresh(db_obj)
            
            self._log_operation("create", model=self.model.__name__, id=getattr(db_obj, 'id', None))
            return db_obj
            
        except SQLAlchemyError as e:
            self.logger.error(
                f"Failed to create {self.model.__name__}",
                extra={
                    "correlation_id": self.correlation_id,
                    "repository": self.__class__.__name__,
                    "error": str(e)
                }
            )
            raise
    
    def get_by_id(self, id: int) -> Optional[ModelType]:
        """Get a record by ID.
        
        Args:
            id: Record ID
            
        Returns:
            Model instance or None if not found
        """
        result = self.db.query(self.model).filter(self.model.id == id).first()
        self._log_operation("get_by_id", model=self.model.__name__, id=id, found=result is not None)
        return result
    
    def get_multi(
        self, 
        skip: int = 0, 
        limit: int = 100, 
        filters: Optional[Dict[str, Any]] = None,
        order_by: Optional[str] = None
    ) -> List[ModelType]:
        """Get multiple records with pagination and filtering.
        
        Args:
            skip: Number of records to skip
            limit: Maximum number of records to return
            filters: Dictionary of field filters
            order_by: Field name to order by
            
        Returns:
            List of model instances
        """
        query = self.db.query(self.model)
        
        if filters:
            for field, value in filters.items():
                if hasattr(self.model, field):
                    query = query.filter(getattr(self.model, field) == value)
                else:
                    self._log_operation("get_multi_filter_field_not_found", model=self.model.__name__, field=field)
        
        if order_by and hasattr(self.model, order_by):
            order_field = getattr(self.model, order_by)
            # Newest first for created_at, ascending for others
            if order_by == 'created_at':
                query = query.order_by(order_field.desc(), self.model.id.desc())
            else:
                query = query.order_by(order_field)
        
        results = query.offset(skip).limit(limit).all()
        self._log_operation(
            "get_multi",
            model=self.model.__name__,
            count=len(results),
            skip=skip,
            limit=limit
        )
        return results
    
    def update(self, id: int, obj_in: Any, **kwargs: Any) -> Optional[ModelType]:
        """Update a record by ID.
        
        Args:
            id: Record ID
            obj_in: Pydantic model or dict with update data
            **kwargs: Additional fields to update
            
        Returns:
            Updated model instance or None if not found
            
        Raises:
            SQLAlchemyError: On database operation failure
        """
        try:
            db_obj = self.get_by_id(id)
            if not db_obj:
                return None
            
            if hasattr(obj_in, 'model_dump'):
                update_data = obj_in.model_dump(exclude_unset=True)
            else:
                update_data = dict(obj_in)
            
            update_data.update(kwargs)
            
            for field, value in update_data.items():
                if hasattr(db_obj, field):
                    setattr(db_obj, field, value)
            
            self.db.flush()
            self.db.refresh(db_obj)
            
            self._log_operation("update", model=self.model.__name__, id=id, fields=list(update_data.keys()))
            return db_obj
            
        except SQLAlchemyError as e:
            self.logger.error(
                f"Failed to update {self.model.__name__} with id {id}",
                extra={
                    "correlation_id": self.correlation_id,
                    "repository": self.__class__.__name__,
                    "error": str(e)
                }
            )
            raise
    
    def delete(self, id: int) -> bool:
        """Hard delete a record by ID.
        
        Args:
            id: Record ID
            
        Returns:
            True if deleted, False if not found
            
        Raises:
            SQLAlchemyError: On database operation failure
        """
        try:
            db_obj = self.get_by_id(id)
            if not db_obj:
                return False
            
            self.db.delete(db_obj)
            self.db.flush()
            
            self._log_operation("delete", model=self.model.__name__, id=id)
            return True
            
        except SQLAlchemyError as e:
            self.logger.error(
                f"Failed to delete {self.model.__name__} with id {id}",
                extra={
                    "correlation_id": self.correlation_id,
                    "repository": self.__class__.__name__,
                    "error": str(e)
                }
            )
            raise
    
    def _log_operation(self, operation: str, **kwargs: Any) -> None:
        """Log repository operation with structured fields.
        
        Args:
            operation: Name of the operation being performed
            **kwargs: Additional fields to include in log
        """
        log_data = {
            "correlation_id": self.correlation_id,
            "repository": self.__class__.__name__,
            "operation": operation,
            **kwargs
        }
        self.logger.info(f"Repository operation: {operation}", extra=log_data)
