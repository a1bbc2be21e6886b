"""
API routes for the Automation ROI Engine.

Stateless endpoints take the full dataset in the request body; workspace
endpoints keep per-session organization state and go through the
recalculation controller.
"""

from flask import request, current_app
from flask_restx import Resource
from marshmallow import ValidationError

from src.app.api.schemas.roi.roi_schemas import (
    calculate_request_schema,
    scenario_request_schema,
    cfo_score_request_schema,
    complexity_request_schema,
    workspace_organization_schema,
    workspace_recalculate_schema,
)
from src.app.api.v1.swaggers.roi.roi_tab import (
    roi_ns,
    calculate_request_model,
    scenario_request_model,
    normalize_request_model,
    cfo_score_request_model,
    complexity_request_model,
    workspace_organization_model,
    workspace_recalculate_model,
    roi_response_model,
    error_response_model,
)
from src.app.services.roi.roi_service import ROIService
from src.common.exceptions import LoadError, ShapeError
from src.common.logger import api_logger
from src.common.response_utils import (
    success_response,
    error_response,
    validation_error_response,
    shape_error_response,
    not_found_response,
    not_ready_response,
    internal_error_response,
)
from src.extensions import limiter


def _calculation_limit():
    return current_app.config.get('RATE_LIMIT_CALCULATION', '60 per minute')


def _json_body():
    return request.get_json(silent=True) or {}


# -------------------------------------------------------------------------
# Normalize
# -------------------------------------------------------------------------
@roi_ns.route('/normalize')
class NormalizeResource(Resource):
    @roi_ns.expect(normalize_request_model)
    @roi_ns.doc('normalize_dataset', responses={
        200: 'Dataset normalized',
        422: 'Dataset has an invalid shape',
        500: 'Internal server error'
    })
    @api_logger(include_response=False)
    def post(self):
        """
        Normalize a raw dataset.

        Fills every process with fully populated sub-records, resolves
        wages (process, then group, then global) and derives complexity.
        """
        try:
            result = ROIService.normalize(_json_body().get('dataset'))
            return success_response(message="Dataset normalized", data=result["data"])
        except ShapeError as e:
            return shape_error_response(e)
        except Exception as e:
            current_app.logger.error(f"Normalize API error: {str(e)}")
            return internal_error_response(message="Failed to normalize dataset", error_details=str(e))


# -------------------------------------------------------------------------
# Calculate
# -------------------------------------------------------------------------
@roi_ns.route('/calculate')
class CalculateResource(Resource):
    @roi_ns.expect(calculate_request_model)
    @roi_ns.response(200, 'ROI calculated', roi_response_model)
    @roi_ns.response(202, 'Calculation blocked until a cost classification is supplied')
    @roi_ns.response(400, 'Validation error', error_response_model)
    @roi_ns.response(422, 'Dataset has an invalid shape', error_response_model)
    @limiter.limit(_calculation_limit)
    @api_logger(include_response=False)
    def post(self):
        """
        Calculate portfolio ROI for a dataset.

        Returns the portfolio results with one result per process, the
        monthly cashflow, the break-even month and the opportunity matrix.
        """
        try:
            params = calculate_request_schema.load(_json_body())
            result = ROIService.calculate(params)

            if result["status"] == "blocked":
                return not_ready_response(status={}, message=result["message"])

            return success_response(message="ROI calculated", data=result["data"])
        except ValidationError as e:
            return validation_error_response(e.messages)
        except ShapeError as e:
            return shape_error_response(e)
        except Exception as e:
            current_app.logger.error(f"ROI calculation API error: {str(e)}")
            return internal_error_response(message="ROI calculation failed", error_details=str(e))


@roi_ns.route('/scenario')
class ScenarioResource(Resource):
    @roi_ns.expect(scenario_request_model)
    @roi_ns.response(200, 'Scenario calculated', roi_response_model)
    @roi_ns.response(400, 'Validation error', error_response_model)
    @roi_ns.response(422, 'Dataset has an invalid shape', error_response_model)
    @limiter.limit(_calculation_limit)
    @api_logger(include_response=False)
    def post(self):
        """Recalculate the portfolio with one automation coverage for every process"""
        try:
            params = scenario_request_schema.load(_json_body())
            result = ROIService.scenario(params)

            if result["status"] == "blocked":
                return not_ready_response(status={}, message=result["message"])

            return success_response(message="Scenario calculated", data=result["data"])
        except ValidationError as e:
            return validation_error_response(e.messages)
        except ShapeError as e:
            return shape_error_response(e)
        except Exception as e:
            current_app.logger.error(f"Scenario API error: {str(e)}")
            return internal_error_response(message="Scenario calculation failed", error_details=str(e))


# -------------------------------------------------------------------------
# Scoring
# -------------------------------------------------------------------------
@roi_ns.route('/cfo-score')
class CFOScoreResource(Resource):
    @roi_ns.expect(cfo_score_request_model)
    @roi_ns.doc('cfo_score', responses={
        200: 'CFO score calculated',
        400: 'Validation error'
    })
    def post(self):
        """
        Calculate the CFO score of one process.

        Risk-adjusted NPV and ROI, absolute-anchor implementation effort,
        execution health and the matrix quadrant.
        """
        try:
            params = cfo_score_request_schema.load(_json_body())
            result = ROIService.cfo_score(params)
            return success_response(message="CFO score calculated", data=result["data"])
        except ValidationError as e:
            return validation_error_response(e.messages)
        except Exception as e:
            current_app.logger.error(f"CFO score API error: {str(e)}")
            return internal_error_response(message="CFO score calculation failed", error_details=str(e))


@roi_ns.route('/complexity')
class ComplexityResource(Resource):
    @roi_ns.expect(complexity_request_model)
    @roi_ns.doc('complexity', responses={
        200: 'Complexity calculated',
        400: 'Validation error'
    })
    def post(self):
        """Complexity scores, index and risk category from inputs, steps and dependencies"""
        try:
            params = complexity_request_schema.load(_json_body())
            result = ROIService.complexity(params)
            return success_response(message="Complexity calculated", data=result["data"])
        except ValidationError as e:
            return validation_error_response(e.messages)
        except Exception as e:
            current_app.logger.error(f"Complexity API error: {str(e)}")
            return internal_error_response(message="Complexity calculation failed", error_details=str(e))


# -------------------------------------------------------------------------
# Workspaces
# -------------------------------------------------------------------------
@roi_ns.route('/workspaces/<string:session_id>')
class WorkspaceResource(Resource):
    @roi_ns.doc('workspace_close', responses={
        200: 'Workspace closed',
        404: 'Workspace not found'
    })
    def delete(self, session_id):
        """Close a workspace; the organization's cached results stay available"""
        result = ROIService.close_workspace(session_id)
        if result["status"] == "error":
            return not_found_response(message=result["message"], resource_type="Workspace")
        return success_response(message="Workspace closed", data=result["data"])


@roi_ns.route('/workspaces/<string:session_id>/organization')
class WorkspaceOrganizationResource(Resource):
    @roi_ns.expect(workspace_organization_model)
    @roi_ns.doc('workspace_switch_organization', responses={
        200: 'Organization loaded and ROI calculated',
        202: 'Organization loaded, ROI blocked',
        400: 'Validation error',
        422: 'Dataset has an invalid shape',
        502: 'Organization data could not be loaded'
    })
    @api_logger(include_response=False)
    def post(self, session_id):
        """
        Switch a workspace to an organization.

        Resets the recalculation controller, loads the organization dataset
        and cost classification (an empty classification is used when none
        is stored) and runs the first recompute.
        """
        try:
            params = workspace_organization_schema.load(_json_body())
            result = ROIService.open_organization(
                session_id,
                params["organization_id"],
                params.get("time_horizon_months"),
            )

            if result["status"] == "blocked":
                return not_ready_response(status=result["data"])

            return success_response(message="Organization loaded", data=result["data"])
        except ValidationError as e:
            return validation_error_response(e.messages)
        except ShapeError as e:
            return shape_error_response(e)
        except LoadError as e:
            return error_response(
                message=e.message,
                data={"organization_id": e.organization_id, "error_code": e.error_code},
                status_code=502
            )
        except Exception as e:
            current_app.logger.error(f"Workspace load API error: {str(e)}")
            return internal_error_response(message="Failed to load organization", error_details=str(e))


@roi_ns.route('/workspaces/<string:session_id>/status')
class WorkspaceStatusResource(Resource):
    @roi_ns.doc('workspace_status')
    def get(self, session_id):
        """Readiness gates, controller phase and warnings of a workspace"""
        result = ROIService.workspace_status(session_id)
        if result["status"] == "error":
            return not_found_response(message=result["message"], resource_type="Workspace")
        return success_response(message="Workspace status", data=result["data"])


@roi_ns.route('/workspaces/<string:session_id>/recalculate')
class WorkspaceRecalculateResource(Resource):
    @roi_ns.expect(workspace_recalculate_model)
    @roi_ns.doc('workspace_recalculate', responses={
        200: 'ROI recalculated',
        202: 'Recalculation blocked, last known results returned',
        404: 'Workspace not found'
    })
    @limiter.limit(_calculation_limit)
    @api_logger(include_response=False)
    def post(self, session_id):
        """Apply selection changes and trigger a recompute"""
        try:
            params = workspace_recalculate_schema.load(_json_body())
            result = ROIService.recalculate(session_id, params)

            if result["status"] == "error":
                return not_found_response(message=result["message"], resource_type="Workspace")
            if result["status"] == "blocked":
                return not_ready_response(status=result["data"])

            return success_response(message="ROI recalculated", data=result["data"])
        except ValidationError as e:
            return validation_error_response(e.messages)
        except Exception as e:
            current_app.logger.error(f"Workspace recalculate API error: {str(e)}")
            return internal_error_response(message="ROI recalculation failed", error_details=str(e))


@roi_ns.route('/workspaces/<string:session_id>/controller')
class WorkspaceControllerResource(Resource):
    @roi_ns.doc('workspace_reset_controller')
    def delete(self, session_id):
        """Reset the recalculation controller so the next trigger recomputes"""
        result = ROIService.reset_controller(session_id)
        if result["status"] == "error":
            return not_found_response(message=result["message"], resource_type="Workspace")
        return success_response(message="Recalculation controller reset", data=result["data"])
