# app/models/supplier.py
"""
Modèle Supplier - Référentiel des fournisseurs
"""

from datetime import datetime
from sqlalchemy import Column, Integer, String, Float, DateTime, Text
from app.database import Base


class Supplier(Base):
    __tablename__ = "suppliers"

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    name = Column(String(255), nullable=False, index=True)
    tax_id = Column(String(100), nullable=True, comment="Identifiant fiscal (NIF)")
    category = Column(String(255), nullable=False, default="Général")
    email = Column(String(255), nullable=True)
    phone = Column(String(100), nullable=True)
    address = Column(Text, nullable=True)
    rating = Column(Float, nullable=False, default=3.0, comment="Note 0-5")
    rating_count = Column(Integer, nullable=False, default=0)
    status = Column(String(20), nullable=False, default="active", comment="active | inactive")
    last_active_date = Column(String(32), nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    updated_at = Column(DateTime, default=datetime.utcnow, onupdate=datetime.utcnow)

    def __repr__(self):
        return f"<Supplier(id={self.id}, name='{self.name}', rating={self.rating})>"
