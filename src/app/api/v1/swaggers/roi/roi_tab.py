"""
ROI Tab Swagger Documentation

Contains all ROI engine related API documentation including:
- Dataset normalization
- Portfolio calculation (results, cashflow, opportunity matrix)
- Coverage scenarios
- CFO score and complexity scoring
- Organization workspaces (load, status, recalculate, reset)
"""

from flask_restx import Namespace, fields

# Create ROI Namespace
roi_ns = Namespace('roi', description='Automation ROI engine operations')

# --------------------------------------------------------------------------
# Request Models
# --------------------------------------------------------------------------

cost_classification_model = roi_ns.model('CostClassification', {
    'organizationId': fields.String(description='Organization ID'),
    'hardCosts': fields.List(fields.String, description='Cost keys counted as hard-dollar savings',
                             example=['laborCosts', 'overtimePremiums', 'softwareLicensing']),
    'softCosts': fields.List(fields.String, description='Cost keys counted as soft-dollar savings',
                             example=['decisionDelays', 'customerImpactCosts'])
})

calculate_request_model = roi_ns.model('CalculateRequest', {
    'dataset': fields.Raw(required=True, description='Dataset with groups, processes and globalDefaults'),
    'costClassification': fields.Nested(cost_classification_model,
                                        description='Cost classification; calculation is blocked without it'),
    'timeHorizonMonths': fields.Integer(description='Horizon of the NPV/IRR flows', default=36, example=36),
    'cashflowMonths': fields.Integer(description='Months of the cashflow projection', default=24, example=24),
    'group': fields.String(description="Restrict to one group ('all' for every group)", example='all')
})

scenario_request_model = roi_ns.inherit('ScenarioRequest', calculate_request_model, {
    'coveragePercentage': fields.Float(required=True, description='Coverage applied to every process', example=60)
})

normalize_request_model = roi_ns.model('NormalizeRequest', {
    'dataset': fields.Raw(required=True, description='Raw dataset')
})

cfo_score_request_model = roi_ns.model('CFOScoreRequest', {
    'initialCost': fields.Float(required=True, description='Initial cost C0', example=50000),
    'savingsYears': fields.List(fields.Float, required=True, description='Savings per year',
                                example=[40000, 40000, 40000]),
    'discountRate': fields.Float(description='Discount rate as decimal', default=0.10),
    'complexityIndex': fields.Float(description='Complexity index 0-10', example=4.5),
    'budget': fields.Float(description='Approved budget'),
    'eac': fields.Float(description='Estimate at completion'),
    'emv': fields.Float(description='Expected monetary value of risk'),
    'riskPremiumFactor': fields.Float(description='Risk premium factor', default=0.03),
    'estimatedCost': fields.Float(description='Estimated cost, defaults to initialCost'),
    'estimatedTime': fields.Float(description='Estimated time in weeks', default=1),
    'costTarget': fields.Float(description='Cost anchor', default=100000),
    'timeTarget': fields.Float(description='Time anchor in months', default=6),
    'globalRiskFactor': fields.Float(description='Risk override 0-10'),
    'startYear': fields.Integer(description='First year whose savings count', default=1)
})

complexity_request_model = roi_ns.model('ComplexityRequest', {
    'inputsCount': fields.Float(description='Number of inputs', example=4),
    'stepsCount': fields.Float(description='Number of steps', example=10),
    'dependenciesCount': fields.Float(description='Number of dependencies', example=2)
})

workspace_organization_model = roi_ns.model('WorkspaceOrganization', {
    'organizationId': fields.String(required=True, description='Organization to load', example='org_123'),
    'timeHorizonMonths': fields.Integer(description='Horizon of the first recompute', example=36)
})

workspace_recalculate_model = roi_ns.model('WorkspaceRecalculate', {
    'reason': fields.String(description='Trigger label, logged only', example='time horizon changed'),
    'timeHorizonMonths': fields.Integer(description='Horizon of the NPV/IRR flows', example=36),
    'group': fields.String(description='Restrict to one group'),
    'selectProcessIds': fields.List(fields.String, description='Processes to select'),
    'deselectProcessIds': fields.List(fields.String, description='Processes to deselect')
})

# --------------------------------------------------------------------------
# Response Models
# --------------------------------------------------------------------------

cfo_score_model = roi_ns.model('CFOScore', {
    'roiA': fields.Float(description='Risk-adjusted ROI (decimal)'),
    'implementationEffort': fields.Float(description='Effort 0-1'),
    'executionHealth': fields.Float(description='Budget health 0-1'),
    'riskFactor': fields.Float(description='Exposure risk factor 0-1'),
    'npvFinal': fields.Float(description='Risk-adjusted NPV'),
    'rAdj': fields.Float(description='Risk-adjusted discount rate'),
    'quadrant': fields.String(enum=['Quick Win', 'Strategic Bet', 'Nice to Have', 'Deprioritize']),
    'effectiveRisk': fields.Float(description='Risk used (global override or complexity)'),
    'roiRiskWeighted': fields.Float(description='ROI weighted by risk multiplier'),
    'cfoScoreRaw': fields.Float(description='Raw CFO score'),
    'cfoScoreNorm': fields.Float(description='CFO score 0-10')
})

cashflow_point_model = roi_ns.model('CashflowPoint', {
    'month': fields.Integer,
    'cost': fields.Float,
    'savings': fields.Float,
    'net': fields.Float,
    'cumulative': fields.Float,
    'cumulativeCost': fields.Float,
    'cumulativeSavings': fields.Float
})

roi_response_model = roi_ns.model('ROIResponse', {
    'success': fields.Boolean(description='Operation success status'),
    'message': fields.String(description='Response message'),
    'data': fields.Raw(description='results, cashflow, breakEvenMonth, opportunityMatrix, quadrantSummary')
})

workspace_status_model = roi_ns.model('WorkspaceStatus', {
    'orgId': fields.String,
    'contextId': fields.Integer,
    'phase': fields.String(enum=['idle', 'pending', 'computing']),
    'processCount': fields.Integer,
    'selectedCount': fields.Integer,
    'costClassificationLoaded': fields.Boolean,
    'dataReadyForRoi': fields.Boolean,
    'roiReady': fields.Boolean,
    'blockedReason': fields.String,
    'hasResults': fields.Boolean,
    'lastError': fields.String,
    'warnings': fields.List(fields.String)
})

error_response_model = roi_ns.model('ROIErrorResponse', {
    'success': fields.Boolean(description='Always false', example=False),
    'message': fields.String(description='Error message'),
    'data': fields.Raw(description='Error details')
})

# Example Responses
EXAMPLE_CFO_SCORE = {
    "roiA": 0.9431,
    "implementationEffort": 0.3515,
    "executionHealth": 1.0,
    "riskFactor": 1.0,
    "npvFinal": 47156.6,
    "rAdj": 0.1135,
    "quadrant": "Quick Win",
    "effectiveRisk": 4.5,
    "roiRiskWeighted": 0.7309,
    "cfoScoreRaw": 0.9716,
    "cfoScoreNorm": 6.57
}

EXAMPLE_SHAPE_ERROR = {
    "success": False,
    "message": "'processes' must be a list, got object",
    "data": {"field": "processes", "error_code": "SHAPE_ERROR"}
}
