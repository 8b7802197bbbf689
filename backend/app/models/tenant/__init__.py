"""Organization-scoped models.

Every table here carries an `organization_id`; repositories filter on it
for every read and write.
"""

from app.models.tenant.farmer import Farmer
from app.models.tenant.livestock import Livestock, HealthRecord, BreedingRecord, FeedingRecord
from app.models.tenant.crop import Crop
from app.models.tenant.financial_service import FinancialService
from app.models.tenant.extension_service import ExtensionService
from app.models.tenant.application import Application
from app.models.tenant.growth_record import GrowthRecord
