"""
Enums for Floorman models.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _


class ProductionFloor(models.TextChoices):
    """
    Stage of the garment production pipeline.

    Declaration order is the canonical floor order used by the
    linking-type default flows. A flow resolved from a product keeps
    the product's own step order.
    """
    KNITTING = 'Knitting', _('Knitting')
    LINKING = 'Linking', _('Linking')
    CHECKING = 'Checking', _('Checking')
    WASHING = 'Washing', _('Washing')
    BOARDING = 'Boarding', _('Boarding')
    SILICON = 'Silicon', _('Silicon')
    SECONDARY_CHECKING = 'Secondary Checking', _('Secondary Checking')
    BRANDING = 'Branding', _('Branding')
    FINAL_CHECKING = 'Final Checking', _('Final Checking')
    WAREHOUSE = 'Warehouse', _('Warehouse')
    DISPATCH = 'Dispatch', _('Dispatch')


class LinkingType(models.TextChoices):
    """How the knitted panels are joined."""
    AUTO_LINKING = 'Auto Linking', _('Auto Linking')    # Fully automatic, no Linking floor
    ROSSO_LINKING = 'Rosso Linking', _('Rosso Linking')
    HAND_LINKING = 'Hand Linking', _('Hand Linking')


class Priority(models.TextChoices):
    URGENT = 'Urgent', _('Urgent')
    HIGH = 'High', _('High')
    MEDIUM = 'Medium', _('Medium')
    LOW = 'Low', _('Low')


class ArticleStatus(models.TextChoices):
    """Article lifecycle status."""
    PENDING = 'Pending', _('Pending')               # Created, nothing produced yet
    IN_PROGRESS = 'In Progress', _('In Progress')   # Work recorded on some floor
    COMPLETED = 'Completed', _('Completed')         # Terminal floor finished
    ON_HOLD = 'On Hold', _('On Hold')               # Set externally
    CANCELLED = 'Cancelled', _('Cancelled')         # Set externally


class QualityGrade(models.TextChoices):
    """Quality grades assigned at grading floors."""
    M1 = 'M1', _('Good Quality')
    M2 = 'M2', _('Needs Repair')
    M3 = 'M3', _('Minor Defects')
    M4 = 'M4', _('Major Defects')

    @property
    def status_tag(self) -> str:
        """Human-readable tag stored on audit entries, e.g. 'M2 - Needs Repair'."""
        return f"{self.value} - {self.label}"


class RepairStatus(models.TextChoices):
    NOT_REQUIRED = 'Not Required', _('Not Required')
    IN_REVIEW = 'In Review', _('In Review')
    REPAIRED = 'Repaired', _('Repaired')
    REJECTED = 'Rejected', _('Rejected')


class LogAction(models.TextChoices):
    """Action tags of audit entries."""
    ARTICLE_ADDED = 'Article Added', _('Article Added')
    QUANTITY_UPDATED = 'Quantity Updated', _('Quantity Updated')

    TRANSFERRED_TO_KNITTING = 'Transferred to Knitting', _('Transferred to Knitting')
    TRANSFERRED_TO_LINKING = 'Transferred to Linking', _('Transferred to Linking')
    TRANSFERRED_TO_CHECKING = 'Transferred to Checking', _('Transferred to Checking')
    TRANSFERRED_TO_WASHING = 'Transferred to Washing', _('Transferred to Washing')
    TRANSFERRED_TO_BOARDING = 'Transferred to Boarding', _('Transferred to Boarding')
    TRANSFERRED_TO_SILICON = 'Transferred to Silicon', _('Transferred to Silicon')
    TRANSFERRED_TO_SECONDARY_CHECKING = (
        'Transferred to Secondary Checking', _('Transferred to Secondary Checking')
    )
    TRANSFERRED_TO_BRANDING = 'Transferred to Branding', _('Transferred to Branding')
    TRANSFERRED_TO_FINAL_CHECKING = (
        'Transferred to Final Checking', _('Transferred to Final Checking')
    )
    TRANSFERRED_TO_WAREHOUSE = 'Transferred to Warehouse', _('Transferred to Warehouse')
    TRANSFERRED_TO_DISPATCH = 'Transferred to Dispatch', _('Transferred to Dispatch')

    M1_QUANTITY_UPDATED = 'M1 Quantity Updated', _('M1 Quantity Updated')
    M2_QUANTITY_UPDATED = 'M2 Quantity Updated', _('M2 Quantity Updated')
    M3_QUANTITY_UPDATED = 'M3 Quantity Updated', _('M3 Quantity Updated')
    M4_QUANTITY_UPDATED = 'M4 Quantity Updated', _('M4 Quantity Updated')
    M2_ITEM_SHIFTED_TO_M1 = 'M2 Item Shifted to M1', _('M2 Item Shifted to M1')
    M2_ITEM_SHIFTED_TO_M3 = 'M2 Item Shifted to M3', _('M2 Item Shifted to M3')
    M2_ITEM_SHIFTED_TO_M4 = 'M2 Item Shifted to M4', _('M2 Item Shifted to M4')
    REPAIR_STARTED = 'Repair Started', _('Repair Started')
    FINAL_QUALITY_CONFIRMED = 'Final Quality Confirmed', _('Final Quality Confirmed')
    FINAL_QUALITY_REJECTED = 'Final Quality Rejected', _('Final Quality Rejected')

    @classmethod
    def transferred_to(cls, floor) -> 'LogAction':
        """Transfer action for the destination floor."""
        return cls[f'TRANSFERRED_TO_{ProductionFloor(floor).name}']

    @classmethod
    def grade_updated(cls, grade) -> 'LogAction':
        return cls[f'{QualityGrade(grade).value}_QUANTITY_UPDATED']

    @classmethod
    def m2_shifted_to(cls, grade) -> 'LogAction':
        return cls[f'M2_ITEM_SHIFTED_TO_{QualityGrade(grade).value}']
