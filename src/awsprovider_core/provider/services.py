"""
Service packages shipped with the provider.
"""

from awsprovider_core.aws.amplify_branch import AmplifyBranch
from awsprovider_core.aws.budgets_action import BudgetAction
from awsprovider_core.aws.directconnect_gateway import DirectConnectGateway
from awsprovider_core.aws.dms_replication_task import DMSReplicationTask
from awsprovider_core.aws.ec2_route_table import EC2RouteTable
from awsprovider_core.aws.eks_addon import EKSAddon
from awsprovider_core.aws.eventbridge_rule import EventBridgeRule
from awsprovider_core.aws.kms_key import KMSKey
from awsprovider_core.aws.lex_slot_type import LexSlotType
from awsprovider_core.aws.sagemaker_feature_group import SageMakerFeatureGroup
from awsprovider_core.provider.registry import ServicePackageRegistry
from awsprovider_core.provider.service_package import BotoServicePackage


class AmplifyServicePackage(BotoServicePackage):
    package_name = "amplify"
    service_name = "amplify"
    resource_types = {"aws_amplify_branch": AmplifyBranch}
    categories = ["Amplify"]


class BudgetsServicePackage(BotoServicePackage):
    package_name = "budgets"
    service_name = "budgets"
    resource_types = {"aws_budgets_budget_action": BudgetAction}
    categories = ["Web Services Budgets"]


class DatabaseMigrationServicePackage(BotoServicePackage):
    package_name = "dms"
    service_name = "dms"
    resource_types = {"aws_dms_replication_task": DMSReplicationTask}
    categories = ["Database Migration Service (DMS)"]


class DirectConnectServicePackage(BotoServicePackage):
    package_name = "directconnect"
    service_name = "directconnect"
    resource_types = {"aws_dx_gateway": DirectConnectGateway}
    categories = ["Direct Connect"]


class EC2ServicePackage(BotoServicePackage):
    package_name = "ec2"
    service_name = "ec2"
    resource_types = {"aws_route_table": EC2RouteTable}
    categories = ["VPC"]


class EKSServicePackage(BotoServicePackage):
    package_name = "eks"
    service_name = "eks"
    resource_types = {"aws_eks_addon": EKSAddon}
    categories = ["EKS"]


class EventsServicePackage(BotoServicePackage):
    package_name = "events"
    service_name = "events"
    resource_types = {"aws_cloudwatch_event_rule": EventBridgeRule}
    categories = ["EventBridge"]


class KMSServicePackage(BotoServicePackage):
    package_name = "kms"
    service_name = "kms"
    resource_types = {"aws_kms_key": KMSKey}
    categories = ["KMS"]


class LexModelsServicePackage(BotoServicePackage):
    package_name = "lexmodels"
    service_name = "lex-models"
    resource_types = {"aws_lex_slot_type": LexSlotType}
    categories = ["Lex"]


class SageMakerServicePackage(BotoServicePackage):
    package_name = "sagemaker"
    service_name = "sagemaker"
    resource_types = {"aws_sagemaker_feature_group": SageMakerFeatureGroup}
    categories = ["SageMaker"]


SERVICE_PACKAGES = [
    AmplifyServicePackage,
    BudgetsServicePackage,
    DatabaseMigrationServicePackage,
    DirectConnectServicePackage,
    EC2ServicePackage,
    EKSServicePackage,
    EventsServicePackage,
    KMSServicePackage,
    LexModelsServicePackage,
    SageMakerServicePackage,
]


def default_registry() -> ServicePackageRegistry:
    """Return a new registry holding one instance of every shipped service package."""
    return ServicePackageRegistry([service_package() for service_package in SERVICE_PACKAGES])
