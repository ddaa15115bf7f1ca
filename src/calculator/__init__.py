from .pricing_config import Tier, PricingMode, Segment, RoomRole, RoomRoleDetector, PricingItem, Category, KitchenOption, PricingConfiguration, InvalidTierError, backfill_roles
from .estimate_input import ItemQuantity, RoomKind, RoomInstance, EstimateInput, reconcile_room_instances
from .estimate_calculator import BreakdownLine, EstimateResult, compute, compare_tiers, line_cost
