from function_agent.nodes.function_agent import make_function_agent_node

__all__ = ["make_function_agent_node"]
