# Models package
from stockroom.models.document import Document
