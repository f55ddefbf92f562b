"""Database models for the user store."""

from sqlalchemy import BigInteger, Column, Integer, String
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class DBUser(Base):  # type: ignore
    """
    User accounts.

    +--------------------+--------------+------+-----+---------+----------------+
    | Field              | Type         | Null | Key | Default | Extra          |
    +--------------------+--------------+------+-----+---------+----------------+
    | id                 | int(11)      | NO   | PRI | NULL    | auto_increment |
    | id_telegram        | bigint(20)   | YES  | UNI | NULL    |                |
    | email              | varchar(255) | YES  | UNI | NULL    |                |
    | phone              | varchar(16)  | YES  |     | NULL    |                |
    | encrypted_password | varchar(255) | YES  |     | NULL    |                |
    +--------------------+--------------+------+-----+---------+----------------+
    """

    __tablename__ = 'users'

    id = Column(Integer, primary_key=True, autoincrement=True)
    id_telegram = Column(BigInteger, unique=True)
    email = Column(String(255), unique=True)
    phone = Column(String(16))
    encrypted_password = Column(String(255))
