from src.service.cinema.domain.entity.catalogue_entity import Catalogue
from src.service.cinema.domain.entity.hall_layout_entity import HallLayout, Seat
from src.service.cinema.domain.entity.movie_entity import Movie
from src.service.cinema.domain.entity.session_entity import Session

__all__ = ['Catalogue', 'HallLayout', 'Movie', 'Seat', 'Session']
