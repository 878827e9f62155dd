import numpy as np
import pandas as pd
from datetime import datetime, date
from decimal import Decimal
from typing import Any


def json_serializer(obj: Any):
    """Safe JSON serializer for pandas, numpy, datetime and decimal values."""
    if isinstance(obj, (pd.Timestamp, datetime, date)):
        return obj.isoformat()
    if isinstance(obj, Decimal):
        return float(obj)
    if isinstance(obj, np.generic):
        return obj.item()
    raise TypeError(f"Type {type(obj)} not serializable")
