"""Document model - one row per stored warehouse layer record."""
from sqlalchemy import Column, String, DateTime, JSON
from sqlalchemy.sql import func

from stockroom.database import Base


class Document(Base):
    """
    A stored document addressed by its slash-joined path.
    
    ``collection_path`` is the path without the trailing id, so the children of
    a node are every document whose collection path is ``{node path}/{collection}``.
    """
    __tablename__ = "documents"
    
    path = Column(String(512), primary_key=True)
    collection_path = Column(String(512), nullable=False, index=True)
    document_id = Column(String(64), nullable=False)
    
    # Opaque field record of the layer
    fields = Column(JSON, nullable=False, default=dict)
    
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    updated_at = Column(DateTime(timezone=True), onupdate=func.now())
