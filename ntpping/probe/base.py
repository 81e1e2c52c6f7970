"""
Abstract base class for query implementations
"""

from abc import ABC, abstractmethod
from ..models import ProbeReply, Target


class BaseQuery(ABC):
    """Abstract base class for time server queries"""
    
    @abstractmethod
    def query(self, target: Target, timeout: float) -> ProbeReply:
        """
        Send one request to target and return the parsed reply.
        
        Args:
            target: Server address and port
            timeout: Seconds to wait for the reply
            
        Returns:
            ProbeReply for this exchange
            
        Raises:
            QueryError: on network, protocol or timeout failure
        """
        pass
    
    def close(self):
        """Clean up resources"""
        pass
    
    def __enter__(self):
        return self
    
    def __exit__(self, exc_type, exc_val, exc_tb):
        self.close()
        return False
