"""
Marshmallow schemas for ROI request validation.

The dataset itself is passed through as a raw dict: its shape is checked
by the engine normalizer, which reports malformed collections as a shape
error rather than a validation error.
"""

from marshmallow import Schema, fields, validate, validates_schema, ValidationError, EXCLUDE

# --------------------------------------------------------------------------
# Calculation Schemas
# --------------------------------------------------------------------------

HORIZON_RANGE = validate.Range(min=1, max=120, error="Time horizon must be between 1 and 120 months")


class CalculateRequestSchema(Schema):
    """Schema for a what-if portfolio calculation"""

    class Meta:
        unknown = EXCLUDE

    dataset = fields.Raw(
        required=True,
        metadata={"description": "Dataset with groups, processes and globalDefaults"}
    )
    cost_classification = fields.Dict(
        data_key="costClassification",
        allow_none=True,
        load_default=None,
        metadata={"description": "Cost classification; calculation is blocked without it"}
    )
    time_horizon_months = fields.Int(
        data_key="timeHorizonMonths",
        load_default=36,
        validate=HORIZON_RANGE,
        metadata={"description": "Horizon of the NPV/IRR flows in months"}
    )
    cashflow_months = fields.Int(
        data_key="cashflowMonths",
        load_default=24,
        validate=HORIZON_RANGE,
        metadata={"description": "Months of the cashflow projection"}
    )
    group = fields.Str(
        allow_none=True,
        load_default=None,
        metadata={"description": "Restrict to one process group ('all' for every group)"}
    )


class ScenarioRequestSchema(CalculateRequestSchema):
    """Schema for a coverage scenario"""

    coverage_percentage = fields.Float(
        data_key="coveragePercentage",
        required=True,
        validate=validate.Range(min=0, max=100),
        metadata={"description": "Automation coverage applied to every process"}
    )


class CFOScoreRequestSchema(Schema):
    """Schema for a single CFO score calculation"""

    class Meta:
        unknown = EXCLUDE

    initial_cost = fields.Float(data_key="initialCost", required=True, validate=validate.Range(min=0))
    savings_years = fields.List(fields.Float(), data_key="savingsYears", required=True)
    discount_rate = fields.Float(data_key="discountRate", load_default=0.10,
                                 metadata={"description": "Decimal rate (0.10 = 10%)"})
    complexity_index = fields.Float(data_key="complexityIndex", load_default=0.0,
                                    validate=validate.Range(min=0, max=10))
    budget = fields.Float(load_default=0.0)
    eac = fields.Float(load_default=0.0)
    emv = fields.Float(load_default=0.0)
    risk_premium_factor = fields.Float(data_key="riskPremiumFactor", load_default=0.03)
    estimated_cost = fields.Float(data_key="estimatedCost", allow_none=True, load_default=None)
    estimated_time = fields.Float(data_key="estimatedTime", load_default=1.0,
                                  metadata={"description": "Implementation time in weeks"})
    cost_target = fields.Float(data_key="costTarget", load_default=100000.0)
    time_target = fields.Float(data_key="timeTarget", load_default=6.0,
                               metadata={"description": "Time anchor in months"})
    global_risk_factor = fields.Float(data_key="globalRiskFactor", allow_none=True, load_default=None,
                                      validate=validate.Range(min=0, max=10))
    start_year = fields.Int(data_key="startYear", load_default=1, validate=validate.Range(min=1))


class ComplexityRequestSchema(Schema):
    """Schema for complexity scoring from raw counts"""

    class Meta:
        unknown = EXCLUDE

    inputs_count = fields.Float(data_key="inputsCount", allow_none=True, load_default=None,
                                validate=validate.Range(min=0))
    steps_count = fields.Float(data_key="stepsCount", allow_none=True, load_default=None,
                               validate=validate.Range(min=0))
    dependencies_count = fields.Float(data_key="dependenciesCount", allow_none=True, load_default=None,
                                      validate=validate.Range(min=0))

    @validates_schema
    def validate_any_count(self, data, **kwargs):
        if all(data.get(k) is None for k in ("inputs_count", "steps_count", "dependencies_count")):
            raise ValidationError("At least one of inputsCount, stepsCount, dependenciesCount is required")


# --------------------------------------------------------------------------
# Workspace Schemas
# --------------------------------------------------------------------------

class WorkspaceOrganizationSchema(Schema):
    """Schema for switching a workspace to an organization"""

    class Meta:
        unknown = EXCLUDE

    organization_id = fields.Str(
        data_key="organizationId",
        required=True,
        validate=validate.Length(min=1),
        metadata={"description": "Organization to load"}
    )
    time_horizon_months = fields.Int(data_key="timeHorizonMonths", allow_none=True, load_default=None,
                                     validate=HORIZON_RANGE)


class WorkspaceRecalculateSchema(Schema):
    """Schema for a workspace recalculation trigger"""

    class Meta:
        unknown = EXCLUDE

    reason = fields.Str(load_default="manual",
                        metadata={"description": "Trigger label, logged only"})
    time_horizon_months = fields.Int(data_key="timeHorizonMonths", allow_none=True, load_default=None,
                                     validate=HORIZON_RANGE)
    group = fields.Str(allow_none=True, load_default=None)
    select_process_ids = fields.List(fields.Str(), data_key="selectProcessIds", load_default=list)
    deselect_process_ids = fields.List(fields.Str(), data_key="deselectProcessIds", load_default=list)


# --------------------------------------------------------------------------
# Schema Instances
# --------------------------------------------------------------------------

calculate_request_schema = CalculateRequestSchema()
scenario_request_schema = ScenarioRequestSchema()
cfo_score_request_schema = CFOScoreRequestSchema()
complexity_request_schema = ComplexityRequestSchema()
workspace_organization_schema = WorkspaceOrganizationSchema()
workspace_recalculate_schema = WorkspaceRecalculateSchema()
