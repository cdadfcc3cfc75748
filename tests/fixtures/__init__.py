"""Test fixtures for the provisioner."""

from .model_factories import (
    DEV_GROUP,
    DLT_TEMPLATE,
    DP_OWNER,
    JOB_TEMPLATE,
    WORKFLOW_TEMPLATE,
    make_config,
    make_data_product,
    make_data_product_dict,
    make_descriptor_yaml,
    make_dlt_specific_dict,
    make_generic_workload,
    make_job_specific_dict,
    make_job_workload,
    make_output_port,
    make_output_port_dict,
    make_output_port_specific_dict,
    make_provision_request,
    make_update_acl_request,
    make_workload_dict,
    make_workspace_info,
)

__all__ = [
    "DEV_GROUP",
    "DLT_TEMPLATE",
    "DP_OWNER",
    "JOB_TEMPLATE",
    "WORKFLOW_TEMPLATE",
    "make_config",
    "make_data_product",
    "make_data_product_dict",
    "make_descriptor_yaml",
    "make_dlt_specific_dict",
    "make_generic_workload",
    "make_job_specific_dict",
    "make_job_workload",
    "make_output_port",
    "make_output_port_dict",
    "make_output_port_specific_dict",
    "make_provision_request",
    "make_update_acl_request",
    "make_workload_dict",
    "make_workspace_info",
]
