"""Services for Content Analyzer."""
from .errors import AnalyzerError, InvalidRequest, InvalidKeyword, InvalidPage, CorpusUnavailable, TransportFailure
from .corpus import Corpus, InMemoryCorpus, SupabaseCorpus
from .analysis_engine import AnalysisEngine
from .analysis_client import AnalysisClient
from .client_controller import ClientController, ControllerState, TableView, TableRow, PaginationView

__all__ = ['AnalyzerError', 'InvalidRequest', 'InvalidKeyword', 'InvalidPage', 'CorpusUnavailable', 'TransportFailure', 'Corpus', 'InMemoryCorpus', 'SupabaseCorpus', 'AnalysisEngine', 'AnalysisClient', 'ClientController', 'ControllerState', 'TableView', 'TableRow', 'PaginationView']
